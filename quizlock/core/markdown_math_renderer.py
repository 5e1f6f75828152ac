"""Markdown + LaTeX rendering for question prompts and option labels.

Prompts are converted to HTML with markdown-it and typeset by MathJax inside
the session view's QWebEngineView. Option labels go on plain Qt buttons,
which cannot run MathJax, so they get a text-only rendering with the TeX
delimiters removed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)
_INLINE_MATH = re.compile(r"\$\$?(.+?)\$\$?")
_TEX_COMMAND = re.compile(r"\\(?:text|mathrm|operatorname)\{([^}]*)\}")


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments, documents or plain labels."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(self, body_html: str, title: str = "QuizLock", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{title}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: #f5f7ff; user-select: none; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
      document.addEventListener('contextmenu', event => event.preventDefault());
      document.addEventListener('copy', event => event.preventDefault());
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(self, markdown_text: str, title: str = "QuizLock", font_size: int = 14) -> str:
        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size)

    @staticmethod
    def render_plain_label(text: str) -> str:
        """Strip math delimiters and simple TeX text commands for a button label."""

        label = _INLINE_MATH.sub(lambda match: match.group(1), text.strip())
        label = _TEX_COMMAND.sub(lambda match: match.group(1), label)
        label = label.replace("\\,", " ").replace("`", "")
        return label or "(empty)"


renderer = MarkdownMathRenderer()
