"""Sandbox scaffold: wrap assembled markup and scripts into one document.

The document is meant for an iframe carrying :data:`SANDBOX_FLAGS`.  A
console bridge forwards every ``console.log/error/warn/info`` call, uncaught
errors and unhandled rejections to the host window as
``{source, type, message}`` messages.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from codeforge.compiler.classifier import Classifier
from codeforge.compiler.linker import TAILWIND_CDN_URL, link_framework
from codeforge.compiler.templating import render_templating
from codeforge.models.artifact import Artifact, ProjectKind
from codeforge.simulator import simulate

logger = logging.getLogger("codeforge.compiler")

SANDBOX_FLAGS = "allow-scripts allow-modals allow-forms allow-popups allow-same-origin"

_SCRIPT_CLOSE_RE = re.compile(r"</(script)", re.IGNORECASE)

_CONSOLE_BRIDGE = """\
<script>
  (function() {
    function send(type, args) {
      try {
        const message = args.map(arg => {
          if (arg === null) return 'null';
          if (arg === undefined) return 'undefined';
          if (typeof arg === 'object') {
            try { return JSON.stringify(arg, null, 2); } catch(e) { return String(arg); }
          }
          return String(arg);
        }).join(' ');
        window.parent.postMessage({ source: __SOURCE__, type: type, message: message }, __ORIGIN__);
      } catch (e) {
        originalError.call(console, 'Failed to send console log', e);
      }
    }

    const originalLog = console.log;
    const originalError = console.error;
    const originalWarn = console.warn;
    const originalInfo = console.info;

    console.log = function(...args) { originalLog.apply(console, args); send('log', args); };
    console.error = function(...args) { originalError.apply(console, args); send('error', args); };
    console.warn = function(...args) { originalWarn.apply(console, args); send('warn', args); };
    console.info = function(...args) { originalInfo.apply(console, args); send('info', args); };

    window.onerror = function(message, source, lineno, colno, error) {
      send('error', [message]);
      // Only draw the panel when nothing rendered yet.
      const root = document.getElementById(__ROOT__);
      if (root && root.innerHTML.trim() === '') {
        root.innerHTML = '<div style="color: #f87171; background: #450a0a; padding: 20px; font-family: system-ui, sans-serif; border-radius: 8px; margin: 20px; border: 1px solid #7f1d1d;">' +
          '<h3 style="margin-top:0">Preview Error</h3>' +
          '<pre style="white-space: pre-wrap;">' + message + '</pre>' +
          '<p style="opacity: 0.8; font-size: 0.9em; margin-top: 10px;">Check console for details.</p>' +
        '</div>';
      }
      return false;
    };

    window.addEventListener('unhandledrejection', function(event) {
      send('error', ['Unhandled Promise Rejection: ' + event.reason]);
    });
  })();
</script>"""

_EMPTY_SHELL = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Preview</title>
  <style>
    body, html {{
      background-color: #ffffff;
      color: #1e293b;
      margin: 0;
      padding: 0;
      height: 100%;
      width: 100%;
      font-family: system-ui, -apple-system, sans-serif;
    }}
    #{root_id} {{
      min-height: 100%;
      display: flex;
      flex-direction: column;
    }}
  </style>
</head>
<body>
  <div id="{root_id}"></div>
</body>
</html>"""

_NATIVE_DOCUMENT = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  {bridge}
  <style>body {{ background-color: #0f172a; color: #f8fafc; font-family: monospace; padding: 20px; }}</style>
</head>
<body>
  <script>
    setTimeout(() => {{
{simulation}
    }}, {delay});
  </script>
</body>
</html>"""


@dataclass(frozen=True)
class ScaffoldOptions:
    """Knobs the host may tune; defaults match :class:`codeforge.settings.Settings`."""

    source_tag: str = "PREVIEW_CONSOLE"
    target_origin: str = "*"
    root_id: str = "root"
    native_delay_ms: int = 500


def console_bridge_script(
    source_tag: str = "PREVIEW_CONSOLE",
    target_origin: str = "*",
    root_id: str = "root",
) -> str:
    """The console-interception ``<script>`` injected into every document."""
    return (
        _CONSOLE_BRIDGE.replace("__SOURCE__", json.dumps(source_tag))
        .replace("__ORIGIN__", json.dumps(target_origin))
        .replace("__ROOT__", json.dumps(root_id))
    )


def empty_shell(root_id: str = "root") -> str:
    return _EMPTY_SHELL.format(root_id=root_id)


def native_document(artifact: Artifact, options: ScaffoldOptions) -> str:
    bridge = console_bridge_script(options.source_tag, options.target_origin, options.root_id)
    return _NATIVE_DOCUMENT.format(
        bridge=bridge,
        simulation=_SCRIPT_CLOSE_RE.sub(r"<\\/\1", simulate(artifact)),
        delay=options.native_delay_ms,
    )


def inject_css(html: str, css: str) -> str:
    if not css:
        return html
    if "</head>" in html:
        return html.replace("</head>", f"<style>{css}</style></head>", 1)
    return html.replace("<body>", f"<head><style>{css}</style></head><body>", 1)


def inject_head(html: str, fragment: str) -> str:
    """Insert *fragment* at the end of the head, or prepend a new head."""
    if "</head>" in html:
        return html.replace("</head>", f"{fragment}\n</head>", 1)
    return f"<head>{fragment}</head>{html}"


def inject_head_start(html: str, fragment: str) -> str:
    """Insert *fragment* at the start of the head, or prepend it to the document."""
    if "<head>" in html:
        return html.replace("<head>", f"<head>{fragment}", 1)
    return fragment + html


def inject_body_end(html: str, fragment: str) -> str:
    if "</body>" in html:
        return html.replace("</body>", f"{fragment}\n</body>", 1)
    return html + fragment


def assemble(
    artifacts: Sequence[Artifact],
    *,
    options: ScaffoldOptions | None = None,
    classifier: Classifier | None = None,
) -> str:
    """Assemble an artifact set into one sandboxable HTML document.

    Never raises for well-formed artifacts: missing pieces only shrink the
    document, down to an empty root shell for an empty set.
    """
    options = options or ScaffoldOptions()
    classifier = classifier or Classifier()
    kind = classifier.classify(artifacts)
    logger.debug("Assembling %d artifacts as %s", len(artifacts), kind)

    if kind is ProjectKind.NATIVE:
        native = classifier.find_native(artifacts)
        if native is not None:
            return native_document(native, options)

    css = "\n".join(f"/* {a.name} */\n{a.content}" for a in classifier.style_artifacts(artifacts))
    scripts = classifier.script_artifacts(artifacts)

    base = classifier.find_preview(artifacts) or classifier.find_markup(artifacts)
    templating = classifier.find_templating(artifacts)
    if base is not None:
        html = base.content
    elif templating is not None and kind is not ProjectKind.FRAMEWORK:
        rendered = render_templating(templating)
        css += rendered.css
        html = rendered.markup
    else:
        html = empty_shell(options.root_id)

    html = inject_css(html, css)
    bridge = console_bridge_script(options.source_tag, options.target_origin, options.root_id)

    if kind is ProjectKind.FRAMEWORK:
        bundle = link_framework(
            scripts,
            root_id=options.root_id,
            include_tailwind=TAILWIND_CDN_URL not in html,
        )
        if bundle.mount_synthesized:
            logger.debug("No mount call found; synthesized one for App")
        html = inject_head(html, f"{bridge}\n{bundle.head}")
        return inject_body_end(html, bundle.body)

    html = inject_head_start(html, bridge)
    if scripts:
        script_content = "\n".join(a.content for a in scripts)
        html = inject_body_end(html, f"<script>{script_content}</script>")
    return html
