"""KOPIS XML 파서"""
from .base_parser import BaseParser
from .performance_parser import PerformanceListParser, PerformanceDetailParser, BoxOfficeParser

__all__ = ["BaseParser", "PerformanceListParser", "PerformanceDetailParser", "BoxOfficeParser"]
