"""레포지토리 패키지 — MongoDB 쿼리 계층.

Repository package — MongoDB query layer.
BaseRepository covers single-collection CRUD; BrandRepository adds the
listing filter and the embedded-model lookups.
"""
