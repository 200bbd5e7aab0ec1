"""Compile, run and package single Java sources through synthesized projects."""
from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO

from buildenv import run_java
from common.config import EngineSettings, load_settings
from common.logging import get_logger
from common.sink import ErrorSink
from synthesis import ProjectSynthesizer
from synthesis.deps import ClassLoaderLink
from synthesis.project import EnvironmentFactory

from .language import JAVA_LANGUAGE, ScriptLanguage

LOGGER = get_logger(__name__)


class NoMainClassError(RuntimeError):
    """Raised when a build produced nothing that can be run."""


@dataclass
class CompileResult:
    main_class: str
    classpath: List[Path] = field(default_factory=list)


class JavaEngine:
    """Façade over :class:`ProjectSynthesizer` and the build environment.

    Every public method takes an optional ``error_writer``.  With a writer,
    failures are printed to it and the method returns None; without one they
    propagate.  Either way the request's temporary tree is removed.

    Setting :attr:`filename` to an existing file makes :meth:`compile` and
    :meth:`eval` use that file instead of the text they are given.
    """

    language: ScriptLanguage = JAVA_LANGUAGE

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        error_writer: Optional[TextIO] = None,
        chain: ClassLoaderLink | None = None,
        environment_factory: EnvironmentFactory | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.error_writer = error_writer
        self.chain = chain
        self.environment_factory = environment_factory
        self.filename: Optional[Path] = None
        self.bindings: Dict[str, Any] = {}

    def _synthesizer(self, error_writer: Optional[TextIO]) -> ProjectSynthesizer:
        settings = self.settings
        verbose = str(self.bindings.get("verbose", "")).lower() == "true"
        debug = str(self.bindings.get("debug", "")).lower() == "true"
        if verbose or debug:
            settings = settings.with_overrides(
                verbose=settings.verbose or verbose,
                debug=settings.debug or debug,
            )
        return ProjectSynthesizer(
            settings,
            error_writer,
            chain=self.chain,
            environment_factory=self.environment_factory,
        )

    def _input(self, source: str | Path | None) -> str | Path | None:
        if self.filename is not None and Path(self.filename).exists():
            return Path(self.filename)
        return source

    def _writer(self, error_writer: Optional[TextIO]) -> Optional[TextIO]:
        return error_writer if error_writer is not None else self.error_writer

    def _guarded(self, error_writer: Optional[TextIO], action: Callable[[ProjectSynthesizer], Any]) -> Any:
        writer = self._writer(error_writer)
        synthesizer: Optional[ProjectSynthesizer] = None
        try:
            synthesizer = self._synthesizer(writer)
            result = action(synthesizer)
            synthesizer.done()
            return result
        except Exception as exc:
            if writer is None:
                raise
            _report(exc, synthesizer.sink if synthesizer is not None else ErrorSink(writer))
            return None
        finally:
            if synthesizer is not None:
                synthesizer.cleanup()

    def compile(self, source: str | Path | None = None, *, error_writer: Optional[TextIO] = None) -> Optional[CompileResult]:
        """Build ``source`` and report the class to run plus its classpath.

        Entries inside a temporary project are gone once this returns; use
        :meth:`eval` or :meth:`make_jar` to keep working with loose text.
        """

        def action(synthesizer: ProjectSynthesizer) -> CompileResult:
            project = synthesizer.synthesize(self._input(source))
            project.build()
            main_class = synthesizer.main_class or project.main_class
            if not main_class:
                raise NoMainClassError(f"No main class found for {source if isinstance(source, Path) else 'script'}")
            return CompileResult(main_class=main_class, classpath=project.classpath(False))

        return self._guarded(error_writer, action)

    def eval(
        self,
        source: str | Path | None = None,
        args: Sequence[str] = (),
        *,
        error_writer: Optional[TextIO] = None,
    ) -> Optional[int]:
        """Compile ``source`` and run its main class; return the exit code."""

        def action(synthesizer: ProjectSynthesizer) -> int:
            project = synthesizer.synthesize(self._input(source))
            project.build()
            main_class = synthesizer.main_class or project.main_class
            if not main_class:
                raise NoMainClassError("No main class found for script")
            return run_java(self.settings.java, main_class, project.classpath(False), args)

        return self._guarded(error_writer, action)

    def build(self, path: Path, *, error_writer: Optional[TextIO] = None) -> Optional[Path]:
        """Compile a ``.java`` file or a ``pom.xml`` without running anything."""

        return self._guarded(error_writer, lambda synthesizer: synthesizer.from_file(Path(path)).build())

    def make_jar(
        self,
        source: str | Path,
        include_sources: bool,
        output: Path | None,
        *,
        error_writer: Optional[TextIO] = None,
    ) -> Optional[Path]:
        """Package the build product of ``source`` into ``output``."""

        def action(synthesizer: ProjectSynthesizer) -> Path:
            project = synthesizer.synthesize(source)
            if output is None and synthesizer.temporary_directory is not None:
                raise ValueError("An output location is required when packaging a temporary project")
            target = project.build(make_jar=True, include_sources=include_sources)
            if output is not None and Path(output).resolve() != target.resolve():
                Path(output).parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(target, output)
                target = Path(output)
            return target

        return self._guarded(error_writer, action)


def _report(exc: Exception, sink: ErrorSink) -> None:
    LOGGER.error("%s", exc)
    sink.write_exception(exc)


__all__ = ["CompileResult", "JavaEngine", "NoMainClassError"]
