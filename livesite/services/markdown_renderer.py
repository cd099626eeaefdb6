import html
from functools import lru_cache
from typing import Optional, Tuple

from latex2mathml.converter import convert as latex_to_mathml
from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin

# (open, close, display_mode)
_BRACKET_DELIMITERS = (
    ("\\(", "\\)", False),
    ("\\[", "\\]", True),
)


def normalize_latex_delimiters(text: str) -> str:
    """
    Rewrite \\(...\\) and \\[...\\] math into $...$ / $$...$$.

    Inline brackets whose content spans lines become display math. An
    opening bracket without a matching close is copied through literally.
    """
    out = []
    i = 0
    length = len(text)
    while i < length:
        match = _delimiter_at(text, i)
        if match:
            open_, close, display_mode = match
            content_start = i + len(open_)
            content_end = text.find(close, content_start)
            if content_end != -1:
                content = text[content_start:content_end]
                fence = "$$" if display_mode or "\n" in content else "$"
                out.append(f"{fence}{content}{fence}")
                i = content_end + len(close)
                continue
        out.append(text[i])
        i += 1
    return "".join(out)


def _delimiter_at(text: str, index: int) -> Optional[Tuple[str, str, bool]]:
    for open_, close, display_mode in _BRACKET_DELIMITERS:
        if text.startswith(open_, index):
            return open_, close, display_mode
    return None


def render_math_html(source: str, display_mode: bool) -> str:
    """
    Render TeX to MathML, or fallback HTML on failure.

    The markup is MathML produced by latex2mathml, not KaTeX output; it only
    carries KaTeX's `katex` / `katex-display` wrapper classes so the same
    stylesheet applies.
    """
    try:
        mathml = latex_to_mathml(source, display="block" if display_mode else "inline")
    except Exception:
        return fallback_math_html(source, display_mode)

    rendered = f'<span class="katex">{mathml}</span>'
    if display_mode:
        return f'<span class="katex-display">{rendered}</span>'
    return rendered


def fallback_math_html(source: str, display_mode: bool) -> str:
    class_name = "math math-display" if display_mode else "math math-inline"
    return f'<span class="{class_name}">{html.escape(source)}</span>'


def _render_inline_math(self, tokens, idx, options, env):
    return render_math_html(tokens[idx].content, display_mode=False)


def _render_display_math(self, tokens, idx, options, env):
    return render_math_html(tokens[idx].content, display_mode=True)


def _render_block_math(self, tokens, idx, options, env):
    return render_math_html(tokens[idx].content.strip("\n"), display_mode=True) + "\n"


@lru_cache(maxsize=1)
def get_markdown() -> MarkdownIt:
    md = (
        MarkdownIt("commonmark")
        .enable(["table", "strikethrough"])
        .use(dollarmath_plugin, double_inline=True)
    )
    md.add_render_rule("math_inline", _render_inline_math)
    md.add_render_rule("math_inline_double", _render_display_math)
    md.add_render_rule("math_block", _render_block_math)
    md.add_render_rule("math_block_label", _render_block_math)
    return md


def render_markdown_to_html(markdown: str) -> str:
    return get_markdown().render(normalize_latex_delimiters(markdown))
