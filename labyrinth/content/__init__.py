"""
Content module - built-in game content.

Each content set has its own subpackage with:
- Encounter definitions per category
- Item and status effect definitions
- A factory that builds the Catalog
"""
