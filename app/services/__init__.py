"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Brand and model services validate forms, enforce name uniqueness and drive
the image files kept by the storage service.
"""
