#!/usr/bin/env python
"""Run the gateway pipeline for one URI against the configured origin store."""
from __future__ import annotations

import argparse
import asyncio
import base64
import logging
from pathlib import Path

from imgedge.config import get_settings
from imgedge.models import EdgeRequest, EdgeResponse
from imgedge.services import get_gateway


def main() -> None:
    parser = argparse.ArgumentParser(description="Transform an origin object like the edge would")
    parser.add_argument("uri", help="Request path, e.g. /photos/cat.jpg")
    parser.add_argument("--query", default="", help="Query string, e.g. 'w=200&f=webp'")
    parser.add_argument("--out", type=Path, required=True, help="Where to write the response body")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())

    request = EdgeRequest(uri=args.uri, querystring=args.query)
    original = EdgeResponse(status=200, body="", bodyEncoding="text")
    result = asyncio.run(get_gateway().handle(request, original))

    if result is original:
        print("Gateway passed the original response through; nothing written.")
        return

    args.out.write_bytes(base64.b64decode(result.body or ""))
    content_type = result.headers["content-type"][0].value
    print(f"Wrote {args.out} ({content_type}, {args.out.stat().st_size} bytes)")


if __name__ == "__main__":
    main()
