"""Helpers backing :mod:`prompt_refiner.service.app`."""

__all__: list = []
