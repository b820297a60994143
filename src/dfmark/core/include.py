"""Recursive, cycle-safe transclusion of other markdown files"""

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from loguru import logger

from dfmark.core.context import RenderContext, make_env
from dfmark.core.extract.tags import find_region
from dfmark.core.models import IncludeResult, TokenKind
from dfmark.core.syntax.blocks import strip_yaml_header
from dfmark.core.utils.paths import is_outside_root, is_relative, split_reference


class InclusionResolver:
    """Loads and renders included files.

    Holds no per-render state: the file stack travels in the RenderContext,
    so one resolver can serve concurrent renders.
    """

    def load(
        self,
        src: str | None,
        raw: str,
        context: RenderContext,
        md: MarkdownIt,
        inline: bool = False,
        ) -> IncludeResult:
        """Render the file src refers to, relative to the file on top of the context stack."""
        if not src:
            return IncludeResult.ok(escapeHtml(raw))

        path, _, region = split_reference(src)
        if not is_relative(path):
            message = f"Absolute path \"{src}\" is not supported in file {context.current_file}"
            logger.error(message)
            return IncludeResult.fail(message)

        resolved = context.resolve(path)
        if is_outside_root(resolved):
            message = f"Include path \"{src}\" is outside of the working folder in file {context.current_file}"
            logger.error(message)
            return IncludeResult.fail(message)

        if context.contains(resolved):
            chain = " --> ".join(context.file_stack + (resolved,))
            message = f"Circular dependency found in \"{context.current_file}\": {chain}"
            logger.warning(message)
            return IncludeResult.fail(message)

        try:
            text = context.read_text(resolved)
        except FileNotFoundError:
            message = f"Can not find reference {src} in file {context.current_file}"
            logger.error(message)
            return IncludeResult.fail(message)
        context.record(resolved)
        logger.debug(f"Including {resolved} into {context.current_file}")

        if region:
            lines = find_region(text.splitlines(), region, 'md')
            if lines is None:
                message = f"Region {region} is not found in {src}"
                logger.warning(message)
                return IncludeResult.fail(message)
            text = "\n".join(lines) + "\n"

        return IncludeResult.ok(self.render(text, context.push(resolved), md, inline))

    def render(self, text: str, context: RenderContext, md: MarkdownIt, inline: bool) -> str:
        env = make_env(context)
        if inline:
            tokens = md.parseInline(strip_yaml_header(text).strip(), env)
            return md.renderer.render(tokens, md.options, env)
        tokens = [t for t in md.parse(text, env) if t.type != TokenKind.yaml_header.value]
        return md.renderer.render(tokens, md.options, env)
