"""Benchmark datasets and experiment runner."""
