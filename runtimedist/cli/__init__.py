"""
rtd - Runtimedist command line.

Usage:
    rtd generate --store releases --out site
    rtd classify node-v22.15.0-linux-x64.tar.xz
    rtd artifacts build uploads.json --downloads downloads.json
    rtd artifacts inspect <tag> --store releases
    rtd releases list --store releases
"""

__cli_name__ = "rtd"
