"""Argument validation helpers for the hdr2rgbe-png CLI."""
from __future__ import annotations

import os
from argparse import Namespace
from typing import List


def validate_args(args: Namespace) -> List[str]:
    """Validate parsed CLI arguments.

    Returns a list of human readable error messages. The caller should abort
    if the list is non-empty.
    """
    errors: List[str] = []
    if not 0 <= args.compress_level <= 9:
        errors.append(f"--compress-level {args.compress_level} out of range [0,9]")
    if args.out_dir and os.path.exists(args.out_dir) and not os.path.isdir(args.out_dir):
        errors.append(f"--out-dir {args.out_dir} is not a directory")
    for path in args.inputs:
        if not os.path.isfile(path):
            errors.append(f"input not found: {path}")
    return errors
