#!/usr/bin/env python3
"""
Quick Start Guide for Element Query.

This example builds a small KML-like document in memory and walks through
path queries, configuration and query profiling.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from element_query import (
    Element,
    ElementQueryConfig,
    InvalidPathSyntaxError,
    compile_path,
    configure,
    find,
    find_all,
    find_text,
)
from element_query.tools import QueryProfiler


def build_document() -> Element:
    """Build a document with two folders of placemarks."""
    kml = Element("kml").set_namespace("http://earth.google.com/kml/2.2")
    document = kml.create_child("Document")

    parks = document.create_child("Folder", {"id": "parks"})
    parks.create_child("name", text="Parks")
    for name, visibility in [("Central Park", "1"), ("Prospect Park", "0")]:
        placemark = parks.create_child("Placemark", {"visibility": visibility})
        placemark.create_child("name", text=name)

    museums = document.create_child("Folder", {"id": "museums"})
    museums.create_child("name", text="Museums")
    placemark = museums.create_child("Placemark", {"visibility": "1"})
    placemark.create_child("name", text="The Met")
    placemark.create_child("description")

    return kml


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Element Query")
    print("=" * 35)

    # Step 1: Build a tree
    print("\n📄 Step 1: Building a Tree")
    print("-" * 30)

    kml = build_document()
    print(f"✅ Built tree with {sum(1 for _ in kml.iter())} elements")

    # Step 2: Query it
    print("\n🔍 Step 2: Path Queries")
    print("-" * 30)

    names = [e.text for e in find_all(kml, "//Placemark/name")]
    print(f"📍 Placemarks: {names}")

    visible = find_all(kml, "//Placemark[@visibility='1']")
    print(f"👁️  Visible placemarks: {len(visible)}")

    museum = find(kml, "//Folder[@id='museums']")
    print(f"🏛️  Museum folder: {find_text(museum, 'name')}")

    described = find_all(kml, "//Placemark[description]/name/..")
    print(f"📝 Placemarks with a description: {[find_text(p, 'name') for p in described]}")

    # Step 3: Navigate relative to a match
    print("\n🧭 Step 3: Relative Navigation")
    print("-" * 30)

    central = find(kml, "//Placemark[@visibility='1']")
    folder = find(central, "..")
    print(f"📂 '{find_text(central, 'name')}' lives in folder '{folder.get_attribute('id')}'")
    print(f"🌳 Root reached from a leaf: {find(central, '/Document') is kml.first_child}")

    # Step 4: Reusable compiled paths and errors
    print("\n⚙️  Step 4: Compiled Paths")
    print("-" * 30)

    compiled = compile_path("//Folder[@id]/name")
    print(f"🧩 Seed: {compiled.seed.name}, steps: {' '.join(str(s) for s in compiled.steps)}")
    print(f"📋 Folder names: {[e.text for e in find_all(kml, compiled)]}")

    try:
        compile_path("//Folder[@id=parks]")
    except InvalidPathSyntaxError as e:
        print(f"❌ Rejected: {e}")

    print("\n🎉 Quick start complete!")


def configuration_example():
    """Example showing configuration presets and statistics."""

    print("\n\n🔧 CONFIGURATION EXAMPLE")
    print("=" * 35)

    kml = build_document()

    for name, config in [
        ("default", ElementQueryConfig()),
        ("performance_optimized", ElementQueryConfig.performance_optimized()),
        ("debugging", ElementQueryConfig.debugging()),
    ]:
        matcher = configure(config)
        for _ in range(3):
            find_all(kml, "//Placemark/name")

        stats = matcher.get_statistics()
        print(f"\n📋 {name}:")
        print(f"  Compilations: {stats['compilations']}")
        print(f"  Cache hit rate: {stats['cache_hit_rate']:.2f}")
        print(f"  Nodes yielded: {stats['nodes_yielded']}")

    configure()


def profiling_example():
    """Example showing query profiling."""

    print("\n\n⏱️  PROFILING EXAMPLE")
    print("=" * 35)

    kml = build_document()
    profiler = QueryProfiler()

    for index, expression in enumerate(["//name", "//Folder//Placemark", "Document/Folder[@id]"]):
        session = profiler.profile_query(f"query_{index}", kml, expression)
        print(f"\n📋 {expression}")
        print(f"  Results: {session.result_count}")
        print(f"  Duration: {session.total_duration_ms:.3f} ms")

    report = profiler.generate_report()
    print("\n💡 Recommendations:")
    for recommendation in profiler.get_optimization_recommendations(report):
        print(f"  - {recommendation}")


def main():
    """Main function."""
    try:
        quick_start_example()
        configuration_example()
        profiling_example()

        print(f"\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
