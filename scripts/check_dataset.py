import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from libtech_directory.catalog.facets import FACETS, build_facet_index
from libtech_directory.catalog.loader import DatasetLoader, LoadError
from libtech_directory.catalog.schema import COLUMN_MAP, SchemaResolver
from libtech_directory.config import settings
from libtech_directory.state import AppState


async def main():
    locale = sys.argv[1] if len(sys.argv) > 1 else settings.default_locale
    loader = DatasetLoader(AppState())

    print(f"Fetching {loader.url} ...")
    try:
        dataset = await loader.load(bust_cache=True)
    except LoadError as e:
        print(f"Load failed: {e}")
        sys.exit(1)

    print(f"{len(dataset)} records, {len(dataset.headers)} columns")
    duplicates = len(dataset.records) - len(dataset.by_identifier)
    if duplicates:
        print(f"Warning: {duplicates} records share an identifier with another record")

    # 1. Column resolution for the requested locale
    resolver = SchemaResolver(dataset.headers, locale)
    print(f"\nColumn mapping (locale '{locale}'):")
    for key in COLUMN_MAP:
        print(f"  {key:<14} -> {resolver.resolve(key) or '(unresolved)'}")

    # 2. Facet sizes
    index = build_facet_index(dataset.records, resolver)
    print("\nFacet tokens:")
    for facet in FACETS:
        tokens = index[facet.label]
        preview = ", ".join(tokens[:settings.facet_preview_limit])
        print(f"  {facet.label:<14} {len(tokens):>3}  {preview}")


if __name__ == "__main__":
    asyncio.run(main())
