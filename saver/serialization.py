"""
Serialization
=============

JSON-friendly encodings of SAVER transcripts (ciphertexts, commitments,
encryption proofs, equality proofs, decryption proofs).

Group elements (G1, G2, GT, ZR) are encoded as base64 strings of charm's
objectToBytes encoding; tuples become lists and come back as tuples.
Keys are not serialized here: they hold the PairingGroup object and are
expected to be regenerated or distributed out of band.

Commitment randomness is never serialized.
"""

import base64
import json
from typing import Any

from charm.core.math.pairing import pc_element
from charm.toolbox.pairinggroup import PairingGroup
from charm.core.engine.util import objectToBytes, bytesToObject

from .errors import SerializationError

ELEMENT_TAG = '__element__'


def serialize_element(elem, group: PairingGroup) -> str:
    """Serialize a group element to a base64 string."""
    return base64.b64encode(objectToBytes(elem, group)).decode('utf-8')


def deserialize_element(data: str, group: PairingGroup):
    """
    Deserialize a group element from a base64 string.

    Raises
    ------
    SerializationError
        If the data is not a valid element encoding
    """
    try:
        return bytesToObject(base64.b64decode(data, validate=True), group)
    except Exception as e:
        raise SerializationError("Invalid group element encoding") from e


def serialize_transcript(obj: Any, group: PairingGroup) -> Any:
    """Recursively encode dicts, tuples/lists, ints, strings and group elements."""
    if isinstance(obj, pc_element):
        return {ELEMENT_TAG: serialize_element(obj, group)}
    if isinstance(obj, dict):
        return {key: serialize_transcript(value, group) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [serialize_transcript(item, group) for item in obj]
    if isinstance(obj, (int, str)):
        return obj
    raise SerializationError(f"Cannot serialize value of type {type(obj).__name__}")


def deserialize_transcript(data: Any, group: PairingGroup) -> Any:
    """Inverse of serialize_transcript(); sequences come back as tuples."""
    if isinstance(data, dict):
        if set(data) == {ELEMENT_TAG}:
            return deserialize_element(data[ELEMENT_TAG], group)
        return {key: deserialize_transcript(value, group) for key, value in data.items()}
    if isinstance(data, list):
        return tuple(deserialize_transcript(item, group) for item in data)
    if isinstance(data, (int, str)):
        return data
    raise SerializationError(f"Unexpected value of type {type(data).__name__}")


def serialize_ciphertext(ciphertext: dict, group: PairingGroup) -> dict:
    return serialize_transcript({'c_0': ciphertext['c_0'], 'c': ciphertext['c']}, group)


def deserialize_ciphertext(data: dict, group: PairingGroup) -> dict:
    """
    Decode a ciphertext.

    Raises SerializationError if fields are missing or malformed.
    """
    ciphertext = deserialize_transcript(data, group)
    if not isinstance(ciphertext, dict) or set(ciphertext) != {'c_0', 'c'}:
        raise SerializationError("Ciphertext must have exactly the fields c_0 and c")
    return ciphertext


def serialize_commitment(commitment: dict, group: PairingGroup) -> dict:
    """Serialize the public value of a commitment (randomness is dropped)."""
    return serialize_transcript({'value': commitment['value']}, group)


def deserialize_commitment(data: dict, group: PairingGroup) -> dict:
    commitment = deserialize_transcript(data, group)
    if not isinstance(commitment, dict) or 'value' not in commitment:
        raise SerializationError("Commitment must have a value")
    return commitment


def dumps(obj: dict, group: PairingGroup) -> str:
    """Serialize a transcript (proof, ciphertext, ...) to a JSON string."""
    return json.dumps(serialize_transcript(obj, group), sort_keys=True)


def loads(data: str, group: PairingGroup) -> dict:
    """Parse a JSON string produced by dumps()."""
    try:
        parsed = json.loads(data)
    except ValueError as e:
        raise SerializationError("Invalid JSON transcript") from e
    return deserialize_transcript(parsed, group)
