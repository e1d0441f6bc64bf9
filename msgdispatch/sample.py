"""Example video-processing classes wired together through callback managers."""

from __future__ import annotations

from dataclasses import dataclass

from .callback import CallbackManager
from .registry import RxCallbackManager


@dataclass
class VideoFrame:
    """A frame of video data with its sequence number."""

    frame_id: int
    data: str


@dataclass
class ProcessResult:
    """Outcome of processing a frame."""

    success: bool
    message: str


class VideoProcessor:
    """Processes frames; registers itself as callback 1 on the manager."""

    def __init__(self, manager: CallbackManager | None = None) -> None:
        manager = manager if manager is not None else CallbackManager.get_instance()
        manager.register_callback(1, VideoProcessor.process_frame, self)

    def process_frame(self, frame: VideoFrame) -> ProcessResult:
        print(f"Processing frame {frame.frame_id}: {frame.data}")
        return ProcessResult(True, "Frame processed successfully")


class VideoStreamHandler:
    """Drives a frame through processing and post-processing callbacks."""

    def __init__(self, manager: CallbackManager | None = None) -> None:
        self._manager = manager if manager is not None else CallbackManager.get_instance()

    def handle_stream(self) -> bool:
        """Process one test frame and return whether post-processing succeeded."""

        def post_process(result: ProcessResult) -> bool:
            print(f"Post-processing result: {result.message}")
            return result.success

        self._manager.register_callback(2, post_process)
        frame = VideoFrame(1, "Test video data")
        result = self._manager.invoke(1, frame, returns=ProcessResult)
        post_process_result = self._manager.invoke(2, result, returns=bool)
        print(f"Final result: {'Success' if post_process_result else 'Failure'}")
        return post_process_result


class RxRtspClientService:
    """Receives video notifications and processes data."""

    def __init__(self) -> None:
        self.frame_count = 0

    def on_video(self, width: int, height: int, fmt: str) -> None:
        self.frame_count += 1
        print(
            f"Video frame received: {width}x{height} format: {fmt} "
            f"(frame #{self.frame_count})"
        )

    def process_data(self, data: str, quality: float) -> int:
        print(f"Processing data: {data} with quality: {quality}")
        return int(len(data) * quality)


class CallbackUser:
    """Triggers callbacks 1 and 2 registered on a :class:`RxCallbackManager`."""

    def __init__(self, callback_manager: RxCallbackManager) -> None:
        self._callback_manager = callback_manager

    def trigger_video_callback(self, width: int, height: int, fmt: str) -> None:
        print("CallbackUser: Triggering video callback...")
        self._callback_manager.invoke_void(1, width, height, fmt)

    def trigger_process_data_callback(self, data: str, quality: float) -> int:
        print("CallbackUser: Triggering process data callback...")
        return self._callback_manager.invoke(2, data, quality, returns=int)