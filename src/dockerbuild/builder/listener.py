import logging
import re
import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, IO, Iterable, List, Optional

from ..exceptions import BuildFailure, BuildInterrupted

logger = logging.getLogger(__name__)

_SUCCESS_RE = re.compile(r"Successfully built ([0-9a-f]+)")


class BuildListener:
    """
    Turns the progress stream of a build engine into a single result.

    The stream is consumed on a worker thread. Events are dicts as produced by
    the docker API: `{"stream": text}`, `{"aux": {"ID": id}}`, `{"error": text}`.
    `future` resolves exactly once: to the image id, or to a BuildFailure when
    the engine reports an error or the stream ends without an id. The stream
    is closed exactly once, on every path.
    """

    def __init__(self, log: Optional[IO[str]] = None):
        self.log = log
        self.future: Future = Future()
        self.image_id: Optional[str] = None
        self._output: List[str] = []
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._close_lock = threading.Lock()
        self._closed = False
        self._close_stream: Optional[Callable[[], Any]] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def output(self) -> str:
        return "".join(self._output)

    def _resolve(self, image_id: Optional[str] = None, error: Optional[BaseException] = None) -> bool:
        with self._lock:
            if self.future.done():
                return False
            if error is not None:
                self.future.set_exception(error)
            else:
                self.future.set_result(image_id)
            return True

    def _close(self, close: Optional[Callable[[], Any]]):
        with self._close_lock:
            if self._closed:
                return
            if close is not None:
                try:
                    close()
                except ValueError as e:
                    # a generator cannot be closed while the worker is inside it
                    logger.debug(f"Stream busy, the worker closes it: {e}")
                    return
                except Exception as e:
                    logger.warning(f"Closing the build stream failed: {e}")
            self._closed = True

    def _write(self, text: str):
        self._output.append(text)
        if self.log is not None:
            self.log.write(text)
            self.log.flush()

    def on_event(self, event: Dict[str, Any]) -> bool:
        """Handle one event; True once the build has failed."""
        if "stream" in event:
            text = event["stream"]
            self._write(text)
            match = _SUCCESS_RE.search(text)
            if match and self.image_id is None:
                self.image_id = match.group(1)
            if text.strip():
                logger.debug(text.rstrip())
        if "status" in event:
            status = event["status"]
            progress = event.get("progress")
            self._write(f"{status} {progress}\n" if progress else f"{status}\n")
        if "aux" in event and isinstance(event["aux"], dict) and "ID" in event["aux"]:
            self.image_id = event["aux"]["ID"]
            logger.debug(f"Engine reported image id {self.image_id}")
        if "error" in event:
            error = event["error"]
            self._write(f"{error}\n")
            self._resolve(error=BuildFailure(error, self.output))
            return True
        return False

    def _consume(self, stream: Iterable[Dict[str, Any]], close: Optional[Callable[[], Any]]):
        try:
            for event in stream:
                if self._cancelled.is_set():
                    break
                if self.on_event(event):
                    break
            if self.image_id is not None:
                self._resolve(image_id=self.image_id)
            else:
                self._resolve(error=BuildFailure("build ended without an image id", self.output))
        except Exception as e:
            logger.debug(f"Build stream failed: {e}")
            self._resolve(error=BuildFailure(str(e), self.output))
        finally:
            self._close(close)

    def start(self, stream: Iterable[Dict[str, Any]], close: Optional[Callable[[], Any]] = None) -> "BuildListener":
        """Consume `stream` on a worker thread; `close` releases it."""
        if close is None:
            close = getattr(stream, "close", None)
        self._close_stream = close
        self._thread = threading.Thread(
            target=self._consume, args=(stream, close), name="dockerbuild-listener", daemon=True
        )
        self._thread.start()
        return self

    def cancel(self):
        """Stop consuming and release the stream."""
        self._cancelled.set()
        self._resolve(error=BuildInterrupted("build cancelled"))
        self._close(self._close_stream)

    def await_image_id(self, timeout: Optional[float] = None) -> str:
        """
        Block until the build finishes.

        Raises:
            BuildFailure: the engine reported an error or ended without an image id
            BuildInterrupted: the wait was interrupted
        """
        try:
            return self.future.result(timeout=timeout)
        except KeyboardInterrupt:
            self.cancel()
            raise BuildInterrupted("interrupted while waiting for the build to finish")

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)
