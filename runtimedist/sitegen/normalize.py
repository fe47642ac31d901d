"""PEP 503 project-name normalization for simple-index directories."""

from __future__ import annotations


def normalize_package_name(name: str) -> str:
    """
    Lowercase, collapse every run of non-alphanumerics into one ``-`` and
    trim leading/trailing ``-``/``_``.

    >>> normalize_package_name("Node.JS__Runtime")
    'node-js-runtime'
    """
    out = []
    prev_sep = False
    for ch in name:
        if ch.isalnum():
            out.append(ch.lower())
            prev_sep = False
        elif not prev_sep:
            out.append("-")
            prev_sep = True
    return "".join(out).strip("-_")
