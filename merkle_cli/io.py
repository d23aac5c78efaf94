"""
CLI document I/O helpers.

Reads JSON documents from a path or stdin ("-") and writes results to
stdout or an output file.
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from merkle_core.config import get_default_config
from merkle_core.merkle import MerkleEngine
from merkle_core.schemas.documents import parse_document
from merkle_core.schemas.errors import DocumentException


logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


def read_input(source: str) -> str:
    """Read text from a file path, or from stdin when source is "-"."""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise DocumentException(f"Input file not found: {path}", source=source)
    return path.read_text()


def load_document(model: type[DocumentT], source: str) -> DocumentT:
    """Read and validate a JSON document."""
    logger.info(f"Loading {model.__name__} from {'stdin' if source == '-' else source}")
    return parse_document(model, read_input(source), source=source)


def write_output(text: str, out: str | None) -> None:
    """Write text to the output file, or stdout when out is None."""
    if out:
        Path(out).write_text(text + "\n")
        logger.info(f"Wrote {out}")
    else:
        print(text)


def dump_document(document: BaseModel) -> str:
    return document.model_dump_json(indent=2)


def resolve_hash_algorithm(args: Namespace, document_algorithm: str | None = None) -> str:
    """
    Pick the hash algorithm for a command.

    Precedence: --hash flag, then the input document, then the runtime
    configuration (YAML, .env and MERKLE_HASH_ALGORITHM).
    """
    if getattr(args, "hash", None):
        return args.hash
    if document_algorithm:
        return document_algorithm
    return get_default_config().hash_algorithm


def engine_for(algorithm: str) -> MerkleEngine:
    return MerkleEngine.for_algorithm(algorithm)
