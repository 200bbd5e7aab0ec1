"""Dependency discovery: loader chain, booter jars and faked records."""

from .booter import ManifestError, booter_class_path, is_booter, parse_manifest, read_manifest
from .classpath import ClassLoaderLink, build_chain, default_chain, iter_chain, to_url, url_to_path
from .discovery import DependencyDiscovery, DependencyRecord

__all__ = [
    "ClassLoaderLink",
    "DependencyDiscovery",
    "DependencyRecord",
    "ManifestError",
    "booter_class_path",
    "build_chain",
    "default_chain",
    "is_booter",
    "iter_chain",
    "parse_manifest",
    "read_manifest",
    "to_url",
    "url_to_path",
]
