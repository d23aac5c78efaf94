"""
Schemas
File: documents.py

Purpose: JSON document schemas for trees and proofs exchanged with the CLI.

Every hash is a 0x-prefixed hex string. The models only check the hex
encoding; node sizes and tree structure are checked by the engine itself
so that its typed errors reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from merkle_core.crypto.hashing import DEFAULT_HASH_ALGORITHM, from_hex, to_hex
from merkle_core.merkle.merkle_proofs import MultiProof
from merkle_core.schemas.errors import DocumentException


DocumentT = TypeVar("DocumentT", bound=BaseModel)


def _check_hex(value: str) -> str:
    from_hex(value)
    return value.lower()


class LeavesDocument(BaseModel):
    """Input document: the ordered leaves of a tree."""

    model_config = ConfigDict(extra="forbid")

    leaves: list[str] = Field(..., description="Leaf hashes, 0x-prefixed hex")

    @field_validator("leaves")
    @classmethod
    def validate_hex(cls, v: list[str]) -> list[str]:
        return [_check_hex(x) for x in v]

    def to_bytes(self) -> list[bytes]:
        return [from_hex(x) for x in self.leaves]


class TreeDocument(BaseModel):
    """A flattened tree, root first."""

    model_config = ConfigDict(extra="forbid")

    hash_algorithm: str = Field(default=DEFAULT_HASH_ALGORITHM)
    tree: list[str] = Field(..., description="Flat node array, 0x-prefixed hex")
    root: str | None = Field(default=None, description="Convenience copy of tree[0]")

    @field_validator("tree")
    @classmethod
    def validate_hex(cls, v: list[str]) -> list[str]:
        return [_check_hex(x) for x in v]

    @field_validator("root")
    @classmethod
    def validate_root_hex(cls, v: str | None) -> str | None:
        return None if v is None else _check_hex(v)

    @classmethod
    def from_tree(cls, tree: tuple[bytes, ...] | list[bytes], hash_algorithm: str) -> "TreeDocument":
        nodes = [to_hex(n) for n in tree]
        return cls(hash_algorithm=hash_algorithm, tree=nodes, root=nodes[0] if nodes else None)

    def to_nodes(self) -> list[bytes]:
        return [from_hex(x) for x in self.tree]

    @property
    def num_leaves(self) -> int:
        return (len(self.tree) + 1) // 2


class ProofDocument(BaseModel):
    """A single-leaf inclusion proof."""

    model_config = ConfigDict(extra="forbid")

    hash_algorithm: str = Field(default=DEFAULT_HASH_ALGORITHM)
    leaf: str = Field(..., description="The leaf being proven")
    tree_index: int = Field(..., ge=0, description="Flat index of the leaf in its tree")
    proof: list[str] = Field(default_factory=list, description="Siblings, leaf to root")
    root: str = Field(..., description="Root the proof was generated against")

    @field_validator("leaf", "root")
    @classmethod
    def validate_node_hex(cls, v: str) -> str:
        return _check_hex(v)

    @field_validator("proof")
    @classmethod
    def validate_proof_hex(cls, v: list[str]) -> list[str]:
        return [_check_hex(x) for x in v]

    def proof_bytes(self) -> list[bytes]:
        return [from_hex(x) for x in self.proof]


class MultiProofDocument(BaseModel):
    """A multi-leaf inclusion proof."""

    model_config = ConfigDict(extra="forbid")

    hash_algorithm: str = Field(default=DEFAULT_HASH_ALGORITHM)
    leaves: list[str] = Field(default_factory=list)
    proof: list[str] = Field(default_factory=list)
    proof_flags: list[bool] = Field(default_factory=list)
    root: str | None = Field(default=None)

    @field_validator("leaves", "proof")
    @classmethod
    def validate_hex(cls, v: list[str]) -> list[str]:
        return [_check_hex(x) for x in v]

    @field_validator("root")
    @classmethod
    def validate_root_hex(cls, v: str | None) -> str | None:
        return None if v is None else _check_hex(v)

    @classmethod
    def from_multi_proof(
        cls,
        multi_proof: MultiProof,
        hash_algorithm: str,
        root: bytes | None = None,
    ) -> "MultiProofDocument":
        return cls(
            hash_algorithm=hash_algorithm,
            leaves=[to_hex(x) for x in multi_proof.leaves],
            proof=[to_hex(x) for x in multi_proof.proof],
            proof_flags=list(multi_proof.proof_flags),
            root=to_hex(root) if root is not None else None,
        )

    def to_multi_proof(self) -> MultiProof:
        return MultiProof(
            leaves=[from_hex(x) for x in self.leaves],
            proof=[from_hex(x) for x in self.proof],
            proof_flags=list(self.proof_flags),
        )


def parse_document(model: type[DocumentT], text: str, source: str | None = None) -> DocumentT:
    """
    Parse and validate a JSON document.

    Raises:
        DocumentException: If the text is not valid JSON or fails validation
    """
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        details: dict[str, Any] = {
            "errors": [
                {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ]
        }
        raise DocumentException(
            f"Invalid {model.__name__}: {e.error_count()} validation error(s)",
            source=source,
            details=details,
        ) from e


__all__ = [
    "LeavesDocument",
    "TreeDocument",
    "ProofDocument",
    "MultiProofDocument",
    "parse_document",
]
