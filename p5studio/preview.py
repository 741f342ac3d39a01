"""
Live preview: the sandboxed HTML document a sketch runs in, and the frame
that only reloads when the sketch meaningfully changes.
"""

import logging
from typing import Callable

from p5studio.config import DEFAULT_P5_URL
from p5studio.utils import normalize_code

logger = logging.getLogger(__name__)

SANDBOX = "allow-scripts allow-same-origin"

SCREENSHOT_REQUEST = "takeScreenshot"
SCREENSHOT_RESULT = "screenshot"

_PREVIEW_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <script src="{p5_url}"></script>
    <style>
      body {{
        margin: 0;
        padding: 0;
        display: flex;
        justify-content: center;
        align-items: center;
        min-height: 100vh;
      }}
      main {{
        display: block;
        margin: 0 auto;
      }}
      .error {{
        color: red;
        font-family: monospace;
        white-space: pre-wrap;
        padding: 10px;
      }}
    </style>
  </head>
  <body>
    <script>
      window.onerror = function(msg, url, lineNo, columnNo, error) {{
        document.body.innerHTML = '<div class="error">Error: ' + msg + '</div>';
        return false;
      }};

      window.console.error = function(...args) {{
        document.body.innerHTML = '<div class="error">Error: ' + args.join(' ') + '</div>';
      }};

      window.addEventListener('message', function(event) {{
        if (event.data && event.data.type === '{request}') {{
          const canvas = document.querySelector('canvas');
          if (canvas) {{
            const dataUrl = canvas.toDataURL('image/png');
            window.parent.postMessage({{ type: '{result}', data: dataUrl }}, '*');
          }}
        }}
      }});

{code}
    </script>
  </body>
</html>
"""


def render_preview_html(code: str, p5_url: str = DEFAULT_P5_URL) -> str:
    """Build the self-contained preview document; the sketch code goes last, verbatim."""
    # str.format would re-interpret braces inside the user's code
    head, tail = _PREVIEW_TEMPLATE.split("{code}")
    head = head.format(p5_url=p5_url, request=SCREENSHOT_REQUEST, result=SCREENSHOT_RESULT)
    return head + code + tail


class PreviewFrame:
    """
    Stand-in for the embedded preview iframe.

    `srcdoc` is reassigned only when the normalized sketch differs from the
    one last rendered; `reassignments` counts how often that happened.
    Messages posted to the frame go to `messenger` (a browser bridge or a
    test double). With no messenger the message is dropped, like a frame
    that never answers.
    """

    sandbox = SANDBOX

    def __init__(
        self,
        p5_url: str = DEFAULT_P5_URL,
        messenger: Callable[[dict], None] | None = None,
        on_assign: Callable[[str], None] | None = None,
    ):
        self.p5_url = p5_url
        self.messenger = messenger
        self.on_assign = on_assign
        self.srcdoc: str | None = None
        self.reassignments = 0
        self._rendered_key: str | None = None

    def refresh(self, code: str) -> bool:
        """Re-render for `code` unless only comments or whitespace changed. Returns True if reassigned."""
        key = normalize_code(code)
        if key == self._rendered_key:
            logger.debug("Preview unchanged after normalization, skipping reload")
            return False
        self._rendered_key = key
        self.srcdoc = render_preview_html(code, self.p5_url)
        self.reassignments += 1
        if self.on_assign:
            self.on_assign(self.srcdoc)
        return True

    def post_message(self, message: dict) -> None:
        if self.messenger is None:
            logger.debug("No messenger attached, dropping %s", message.get("type"))
            return
        self.messenger(message)
