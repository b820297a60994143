"""Select lines from an external source file for a code snippet token"""

from loguru import logger

from dfmark.core.context import RenderContext
from dfmark.core.extract.directives import Directive, DirectiveError, parse_directive
from dfmark.core.extract.tags import find_region
from dfmark.core.models import ExtractionResult, Fences
from dfmark.core.utils.paths import is_outside_root, is_relative


class CodeExtractor:
    """Stateless; one instance may serve any number of concurrent renders."""

    def extract(self, fences: Fences, context: RenderContext) -> ExtractionResult:
        """Return the lines fences selects, or why it selects nothing.

        Only I/O errors other than a missing file propagate.
        """
        if not is_relative(fences.path):
            message = f"Code absolute path: {fences.path} is not supported in file {context.current_file}"
            logger.error(message)
            return ExtractionResult.fail(message)

        resolved = context.resolve(fences.path)
        if is_outside_root(resolved):
            message = f"Code path: {fences.path} is outside of the working folder in file {context.current_file}"
            logger.error(message)
            return ExtractionResult.fail(message)

        try:
            directive = parse_directive(fences.query, fences.fragment)
        except DirectiveError as e:
            logger.warning(f"{e} for {fences.path} in file {context.current_file}")
            return ExtractionResult.fail(f"{e} for {fences.path}")

        try:
            text = context.read_text(resolved)
        except FileNotFoundError:
            message = f"Can not find reference {fences.path}"
            logger.error(message)
            return ExtractionResult.fail(message)
        context.record(resolved)
        logger.debug(f"Read code snippet {resolved} for {context.current_file}")

        return self.select(text.splitlines(), directive, fences)

    def select(self, lines: list[str], directive: Directive, fences: Fences) -> ExtractionResult:
        if directive.whole_file:
            selected = lines
        elif directive.tag is not None:
            selected = find_region(lines, directive.tag, fences.lang)
            if selected is None:
                message = f"Tag {directive.tag} is not found in {fences.path}"
                logger.warning(message)
                return ExtractionResult.fail(message)
        else:
            selected = []
            for r in directive.ranges:
                if r.start > len(lines):
                    message = f"Range {r} is out of bounds for {fences.path} ({len(lines)} lines)"
                    logger.warning(message)
                    return ExtractionResult.fail(message)
                selected.extend(lines[r.start - 1:r.end])

        if not selected:
            return ExtractionResult.fail(f"No code found in {fences.path}")
        return ExtractionResult.ok(selected)
