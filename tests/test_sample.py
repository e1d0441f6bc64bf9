import pytest

from msgdispatch.callback import CallbackError, CallbackManager
from msgdispatch.registry import RxCallbackManager
from msgdispatch.sample import (
    CallbackUser,
    ProcessResult,
    RxRtspClientService,
    VideoFrame,
    VideoProcessor,
    VideoStreamHandler,
)


def test_process_frame_result(capsys):
    processor = VideoProcessor(CallbackManager())
    result = processor.process_frame(VideoFrame(7, "abc"))
    assert result == ProcessResult(True, "Frame processed successfully")
    assert "Processing frame 7: abc" in capsys.readouterr().out


def test_processor_registers_callback_one():
    manager = CallbackManager()
    VideoProcessor(manager)
    result = manager.invoke(1, VideoFrame(3, "x"), returns=ProcessResult)
    assert result.success is True


def test_handle_stream_success(capsys):
    manager = CallbackManager()
    VideoProcessor(manager)
    assert VideoStreamHandler(manager).handle_stream() is True
    out = capsys.readouterr().out
    assert "Processing frame 1: Test video data" in out
    assert "Post-processing result: Frame processed successfully" in out
    assert "Final result: Success" in out


def test_handle_stream_without_processor_fails():
    with pytest.raises(CallbackError):
        VideoStreamHandler(CallbackManager()).handle_stream()


def test_on_video_counts_frames(capsys):
    service = RxRtspClientService()
    service.on_video(1920, 1080, "H.264")
    service.on_video(1920, 1080, "H.264")
    assert service.frame_count == 2
    out = capsys.readouterr().out
    assert "Video frame received: 1920x1080 format: H.264 (frame #1)" in out
    assert "(frame #2)" in out


def test_process_data():
    assert RxRtspClientService().process_data("TestData", 0.75) == 6
    assert RxRtspClientService().process_data("", 0.75) == 0


def test_callback_user_triggers_registered_methods(capsys):
    manager = RxCallbackManager()
    service = RxRtspClientService()
    manager.register_callback(1, RxRtspClientService.on_video, service)
    manager.register_callback(2, RxRtspClientService.process_data, service)
    user = CallbackUser(manager)
    user.trigger_video_callback(640, 480, "MJPEG")
    assert service.frame_count == 1
    assert user.trigger_process_data_callback("TestData", 1) == len("TestData")
    out = capsys.readouterr().out
    assert "CallbackUser: Triggering video callback..." in out
    assert "640x480 format: MJPEG" in out


def test_callback_user_without_callbacks_raises():
    user = CallbackUser(RxCallbackManager())
    with pytest.raises(CallbackError, match="Callback not found: 1"):
        user.trigger_video_callback(1, 1, "raw")