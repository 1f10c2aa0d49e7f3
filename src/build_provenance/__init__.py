"""
Resolved dependency collection for pipeline provenance documents.

`resolved_dependencies` holds the aggregation and dedupe core; `material`
holds the extractors that turn run status snapshots into provenance materials.
"""

__all__: list[str] = []
