"""Public façade for compiling, running and packaging single Java sources."""

from .java_engine import CompileResult, JavaEngine, NoMainClassError
from .language import JAVA_LANGUAGE, ScriptLanguage

__all__ = ["CompileResult", "JavaEngine", "NoMainClassError", "JAVA_LANGUAGE", "ScriptLanguage"]
