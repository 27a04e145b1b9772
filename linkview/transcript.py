import html
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import IO, Optional, Union

from .errors import SinkError
from .graph_components.core import Palette

logger = logging.getLogger(__name__)


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

_PREAMBLE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Linked list operation transcript at {timestamp}</title>
</head>
<body>
<script src="https://d3js.org/d3.v4.min.js"></script>
<script src="https://unpkg.com/viz.js@1.8.0/viz.js"></script>
<script src="https://unpkg.com/d3-graphviz@0.1.2/build/d3-graphviz.js"></script>
<h1>Linked list operation transcript</h1>
<h3>Time generated: {timestamp}</h3>
{legend}<hr/>
"""

_LEGEND_ENTRY = (
    '<p>Elements highlighted in <span style="font-weight: 600; color: {colour};">{colour}</span> '
    "were <strong>{meaning}</strong> as a result of the last operation.</p>\n"
)

_POSTAMBLE = "<hr/>\n</body>\n</html>\n"

_OPERATION = "<{tag}><code>{operation}</code> at {timestamp}</{tag}>\n"

_DIAGRAM_OPEN = (
    '<div id="{diagram_id}"></div>\n'
    "<script>\n"
    "d3.select('[id=\"{diagram_id}\"]').graphviz().engine('dot').renderDot(`\n"
)

_DIAGRAM_CLOSE = "`);\n</script>\n"


def current_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)[:-3]


class HtmlTranscript:
    """HTML document collecting one entry per list operation.

    Entries with a diagram embed the dot source in a d3-graphviz script;
    read-only operations get a smaller heading and no diagram.
    """

    def __init__(
        self,
        output: Union[str, Path, IO[str]],
        *,
        palette: Optional[Palette] = None,
    ) -> None:
        self._owns_stream = isinstance(output, (str, Path))
        try:
            if isinstance(output, (str, Path)):
                self._stream: IO[str] = open(output, "w", encoding="utf-8")
            else:
                self._stream = output
        except OSError as exc:
            logger.error("Failed to create output file: %s", exc)
            raise SinkError(f"Failed to create output file: {exc}") from exc
        self.palette = palette if palette is not None else Palette()
        self.closed = False
        self._write_preamble()

    def _write(self, text: str) -> None:
        if self.closed:
            raise SinkError("Transcript is already closed.")
        try:
            self._stream.write(text)
            self._stream.flush()
        except OSError as exc:
            logger.error("Failed to write transcript: %s", exc)
            raise SinkError(f"Failed to write transcript: {exc}") from exc

    def _write_preamble(self) -> None:
        legend = ""
        if self.palette.new:
            legend += _LEGEND_ENTRY.format(colour=html.escape(self.palette.new), meaning="added")
        if self.palette.modified:
            legend += _LEGEND_ENTRY.format(colour=html.escape(self.palette.modified), meaning="modified")
        self._write(_PREAMBLE.format(timestamp=current_timestamp(), legend=legend))

    def write_operation(self, operation: str, dot: Optional[str] = None) -> None:
        tag = "h2" if dot is not None else "h4"
        parts = [
            _OPERATION.format(
                tag=tag,
                operation=html.escape(operation),
                timestamp=current_timestamp(),
            )
        ]
        if dot is not None:
            parts.append(_DIAGRAM_OPEN.format(diagram_id=uuid.uuid4()))
            # Backticks and ${ would end or interpolate the JS template literal.
            parts.append(dot.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${"))
            parts.append(_DIAGRAM_CLOSE)
        self._write("".join(parts))

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._write(_POSTAMBLE)
        finally:
            self.closed = True
            if self._owns_stream:
                try:
                    self._stream.close()
                except OSError as exc:
                    logger.error("Failed to close output file: %s", exc)
                    raise SinkError(f"Failed to close output file: {exc}") from exc

    def __enter__(self) -> "HtmlTranscript":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
