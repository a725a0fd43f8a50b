"""React linking: turn a set of ES modules into one in-browser Babel script.

The sandbox has no bundler, so modules are concatenated into a single
script.  Local imports are dropped (their bindings exist once every file is
concatenated), external imports are hoisted and resolved through an import
map, and export keywords are removed.

File order comes from a filename score rather than a dependency graph:
utilities, then components, then ``App``, then the entry point.  Files with
equal scores keep their extraction order, which is sometimes wrong.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from codeforge.models.artifact import Artifact

BABEL_STANDALONE_URL = "https://unpkg.com/@babel/standalone/babel.min.js"
TAILWIND_CDN_URL = "https://cdn.tailwindcss.com"

IMPORT_MAP: dict[str, str] = {
    # React core
    "react": "https://esm.sh/react@18.2.0",
    "react-dom": "https://esm.sh/react-dom@18.2.0",
    "react-dom/client": "https://esm.sh/react-dom@18.2.0/client",
    # Utilities
    "clsx": "https://esm.sh/clsx",
    "tailwind-merge": "https://esm.sh/tailwind-merge",
    "date-fns": "https://esm.sh/date-fns",
    "lodash": "https://esm.sh/lodash",
    "axios": "https://esm.sh/axios",
    "uuid": "https://esm.sh/uuid",
    # UI & animation
    "framer-motion": "https://esm.sh/framer-motion@10.16.4",
    "lucide-react": "https://esm.sh/lucide-react@0.263.1",
    "recharts": "https://esm.sh/recharts@2.10.3",
    "react-icons": "https://esm.sh/react-icons@4.10.1",
    "react-icons/fa": "https://esm.sh/react-icons@4.10.1/fa",
    "react-icons/md": "https://esm.sh/react-icons@4.10.1/md",
    "react-icons/fi": "https://esm.sh/react-icons@4.10.1/fi",
    "react-icons/bi": "https://esm.sh/react-icons@4.10.1/bi",
    "react-icons/ai": "https://esm.sh/react-icons@4.10.1/ai",
    "react-icons/bs": "https://esm.sh/react-icons@4.10.1/bs",
    # Carousels
    "react-slick": "https://esm.sh/react-slick@0.29.0",
    "slick-carousel": "https://esm.sh/slick-carousel@1.8.1",
    "swiper": "https://esm.sh/swiper@10.0.0",
    "swiper/react": "https://esm.sh/swiper@10.0.0/react",
    "swiper/css": "https://esm.sh/swiper@10.0.0/css",
    # Markdown
    "react-markdown": "https://esm.sh/react-markdown@9.0.0",
    # 3D
    "three": "https://esm.sh/three@0.154.0",
    "@react-three/fiber": "https://esm.sh/@react-three/fiber@8.13.0",
    "@react-three/drei": "https://esm.sh/@react-three/drei@9.77.0",
}

# Library needle -> stylesheets the library expects on the page.
CONDITIONAL_STYLESHEETS: dict[str, tuple[str, ...]] = {
    "slick": (
        "https://cdnjs.cloudflare.com/ajax/libs/slick-carousel/1.6.0/slick.min.css",
        "https://cdnjs.cloudflare.com/ajax/libs/slick-carousel/1.6.0/slick-theme.min.css",
    ),
}

MOUNT_CALLS: tuple[str, ...] = ("createRoot", "ReactDOM.render")
APP_DECLARATIONS: tuple[str, ...] = ("function App", "class App", "const App")

_ENTRY_RE = re.compile(r"(?:index|main)\.(?:js|jsx|ts|tsx)$", re.IGNORECASE)
_APP_RE = re.compile(r"App\.(?:js|jsx|ts|tsx)$", re.IGNORECASE)
_COMPONENTS_RE = re.compile(r"components?/", re.IGNORECASE)

# Bindings are limited to identifiers and `{ } , *`, so a match never runs
# past a side-effect import into the next statement.
_IMPORT_FROM_RE = re.compile(r"import\s+[\w*{}\s,$]+?\s+from\s+['\"](.*?)['\"];?")
_SIDE_EFFECT_IMPORT_RE = re.compile(r"import\s+['\"](.*?)['\"];?")
_EXPORT_DEFAULT_RE = re.compile(r"export\s+default\s+")
_EXPORT_RE = re.compile(r"export\s+")

_PROCESS_SHIM = "window.process = { env: { NODE_ENV: 'development' } };"


@dataclass
class LinkedBundle:
    """Head and body fragments produced by :func:`link_framework`."""

    head: str
    body: str
    external_imports: list[str] = field(default_factory=list)
    entry_point_found: bool = False
    mount_synthesized: bool = False


def link_priority(name: str) -> int:
    """Lower scores are emitted first."""
    if _ENTRY_RE.search(name):
        return 100
    if _APP_RE.search(name):
        return 50
    if _COMPONENTS_RE.search(name):
        return 10
    return 0


def order_for_linking(artifacts: Sequence[Artifact]) -> list[Artifact]:
    return sorted(artifacts, key=lambda a: link_priority(a.name))


def has_mount_call(source: str) -> bool:
    return any(call in source for call in MOUNT_CALLS)


def _is_local(specifier: str) -> bool:
    return specifier.startswith((".", "/"))


def strip_imports(source: str, external: dict[str, None]) -> str:
    """Remove import statements, recording external ones in *external*.

    *external* is used as an insertion-ordered set.
    """

    def _collect(match: re.Match[str]) -> str:
        if not _is_local(match.group(1)):
            external.setdefault(match.group(0))
        return ""

    source = _IMPORT_FROM_RE.sub(_collect, source)
    return _SIDE_EFFECT_IMPORT_RE.sub(_collect, source)


def strip_exports(source: str) -> str:
    source = _EXPORT_DEFAULT_RE.sub("", source)
    return _EXPORT_RE.sub("", source)


def import_map_script() -> str:
    return f'<script type="importmap">{json.dumps({"imports": IMPORT_MAP})}</script>'


def conditional_stylesheets(sources: Sequence[str]) -> list[str]:
    links: list[str] = []
    for needle, hrefs in CONDITIONAL_STYLESHEETS.items():
        if any(needle in source for source in sources):
            links.extend(f'<link rel="stylesheet" type="text/css" href="{href}" />' for href in hrefs)
    return links


def mount_script(root_id: str) -> str:
    target = json.dumps(root_id)
    return (
        "if (typeof App !== 'undefined') {\n"
        f"  const root = ReactDOM.createRoot(document.getElementById({target}));\n"
        "  root.render(React.createElement(App));\n"
        "}"
    )


def _guarded(body: str, root_id: str) -> str:
    return (
        "try {\n"
        f"{body}\n"
        "} catch (err) {\n"
        '  console.error("Runtime Script Error:", err);\n'
        f"  const root = document.getElementById({json.dumps(root_id)});\n"
        "  if (root) {\n"
        "    root.innerHTML = '<div style=\"color:red; padding:20px;\"><h3>Script Error</h3>"
        "<pre>' + err.message + '</pre></div>';\n"
        "  }\n"
        "}"
    )


def link_framework(
    artifacts: Sequence[Artifact],
    *,
    root_id: str = "root",
    include_tailwind: bool = True,
) -> LinkedBundle:
    """Link the script artifacts of a React project into one Babel script.

    *artifacts* should contain only script artifacts; anything passed is
    linked.
    """
    external: dict[str, None] = {}
    entry_point_found = False
    parts: list[str] = []

    for artifact in order_for_linking(artifacts):
        content = artifact.content
        if has_mount_call(content):
            entry_point_found = True
        content = strip_imports(content, external)
        content = strip_exports(content)
        parts.append(f"// --- {artifact.name} ---\n{content}")

    mount_synthesized = not entry_point_found and any(
        decl in part for part in parts for decl in APP_DECLARATIONS
    )
    body = "\n\n".join(parts)
    if mount_synthesized:
        body += "\n" + mount_script(root_id)

    script = "\n".join(
        [
            '<script type="text/babel" data-type="module">',
            *external,
            _PROCESS_SHIM,
            _guarded(body, root_id),
            "</script>",
        ]
    )

    head_parts: list[str] = []
    if include_tailwind:
        head_parts.append(f'<script src="{TAILWIND_CDN_URL}"></script>')
    head_parts.append(import_map_script())
    head_parts.extend(conditional_stylesheets([a.content for a in artifacts]))

    return LinkedBundle(
        head="\n".join(head_parts),
        body=f'<script src="{BABEL_STANDALONE_URL}"></script>\n{script}',
        external_imports=list(external),
        entry_point_found=entry_point_found,
        mount_synthesized=mount_synthesized,
    )
