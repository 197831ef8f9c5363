#!/usr/bin/env python3
"""
Basic aioessentials example.

This example demonstrates:
- Sequential map() over a directory listing
- Concurrent multi_map() for the same work
- find() and process() over plain iterables
"""

import asyncio
import os
import sys
import time
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

import aioessentials
from aioessentials import NOT_FOUND


def stat_with_callback(path, callback):
    try:
        result = os.stat(path)
    except OSError as e:
        callback(e)
    else:
        callback(None, result)


stat = aioessentials.promisify(stat_with_callback)


async def size_of(path, index, paths):
    await aioessentials.delay(10)
    return (await stat(path)).st_size


async def main():
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    paths = sorted(str(p) for p in root_path.iterdir() if p.is_file())

    print(f"Listing: {root_path} ({len(paths)} files)")
    print("-" * 50)

    start = time.monotonic()
    sizes = await aioessentials.map(paths, size_of)
    print(f"map():       {sum(sizes):,} bytes in {time.monotonic() - start:.3f}s")

    start = time.monotonic()
    sizes = await aioessentials.multi_map(paths, size_of)
    print(f"multi_map(): {sum(sizes):,} bytes in {time.monotonic() - start:.3f}s")

    largest = await aioessentials.find(paths, lambda path, i, ps: os.path.getsize(path) > 100_000)
    if largest is NOT_FOUND:
        print("No file above 100kB")
    else:
        print(f"First file above 100kB: {largest}")

    async def tally(context, size, index, source):
        await asyncio.sleep(0)
        context.total = getattr(context, 'total', 0) + size

    context = await aioessentials.process(sizes, tally)
    print(f"process():   {getattr(context, 'total', 0):,} bytes")


if __name__ == "__main__":
    asyncio.run(main())
