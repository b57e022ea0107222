"""Shared test fakes and builders."""
