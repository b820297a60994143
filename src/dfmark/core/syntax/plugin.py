"""Register the DFM syntax rules on a MarkdownIt instance"""

from markdown_it import MarkdownIt

from dfmark.core.syntax.blocks import (
    fences_rule, include_block_rule, note_rule, section_rule, yaml_header_rule,
)
from dfmark.core.syntax.inline import (
    include_inline_rule, xref_autolink_rule, xref_link_rule, xref_shortcut_rule,
)


_INTERRUPTS = {"alt": ["paragraph"]}


def dfm_plugin(md: MarkdownIt) -> None:
    # block rules run before lheading so a setext underline cannot claim their line
    md.block.ruler.before("hr", "dfm_yaml_header", yaml_header_rule)
    md.block.ruler.before("lheading", "dfm_note", note_rule)
    md.block.ruler.before("lheading", "dfm_section", section_rule)
    md.block.ruler.before("lheading", "dfm_fences", fences_rule, _INTERRUPTS)
    md.block.ruler.before("lheading", "dfm_include_block", include_block_rule, _INTERRUPTS)

    md.inline.ruler.before("link", "dfm_include_inline", include_inline_rule)
    md.inline.ruler.before("link", "dfm_xref_link", xref_link_rule)
    md.inline.ruler.before("autolink", "dfm_xref_autolink", xref_autolink_rule)
    md.inline.ruler.push("dfm_xref_shortcut", xref_shortcut_rule)
