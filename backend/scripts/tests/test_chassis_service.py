import asyncio
import threading

from app.models.chassis import OutcomeKind, UploadedImage
from app.services.chassis_service import ChassisService
from app.services.storage import ImageStorage

from conftest import FakeTextDetector

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def make_image(content: bytes = JPEG_BYTES, filename: str = "car.jpg") -> UploadedImage:
    return UploadedImage(content=content, filename=filename, content_type="image/jpeg")


def run(service: ChassisService, images):
    return asyncio.run(service.process(images))


def test_found_chassis_saves_image(service, fake_detector, storage, saved_files):
    fake_detector.text = "CHASSIS NO: MA3ERLF1S00123456 DATE 20231015"

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.SUCCESS
    assert outcome.chassis_number == "MA3ERLF1S00123456"
    assert outcome.image_name.endswith(".jpg")
    assert saved_files() == [outcome.image_name]
    assert (storage.upload_dir / outcome.image_name).read_bytes() == JPEG_BYTES


def test_no_match_does_not_save(service, fake_detector, saved_files):
    fake_detector.text = "ENGINE OIL CHANGE DUE 20231015"

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.NO_MATCH
    assert outcome.extracted_text == "ENGINE OIL CHANGE DUE 20231015"
    assert saved_files() == []


def test_no_match_text_is_truncated(fake_detector, storage):
    fake_detector.text = "abc " * 250
    service = ChassisService(text_detector=fake_detector, storage=storage, preview_length=400)

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.NO_MATCH
    assert len(outcome.extracted_text) == 400


def test_empty_ocr_text(service, fake_detector, saved_files):
    fake_detector.text = ""

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.NO_TEXT
    assert saved_files() == []


def test_no_images(service, fake_detector):
    outcome = run(service, [])

    assert outcome.kind is OutcomeKind.CALLER_ERROR
    assert outcome.detail == "No image uploaded"
    assert fake_detector.calls == []


def test_unconfigured_ocr(storage):
    service = ChassisService(text_detector=None, storage=storage)

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.CONFIG_ERROR


def test_only_first_image_is_read(service, fake_detector):
    fake_detector.text = "AB12-CD34-EF"
    first = make_image(b"first", "front.png")
    second = make_image(b"second", "back.jpg")

    outcome = run(service, [first, second])

    assert fake_detector.calls == [b"first"]
    assert outcome.kind is OutcomeKind.SUCCESS
    assert outcome.chassis_number == "AB12CD34EF"
    assert outcome.image_name.endswith(".png")


def test_ocr_failure_is_internal_error(storage, saved_files):
    detector = FakeTextDetector(error=RuntimeError("quota exceeded"))
    service = ChassisService(text_detector=detector, storage=storage)

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.INTERNAL_ERROR
    assert "quota exceeded" in outcome.detail
    assert saved_files() == []


def test_storage_failure_is_internal_error(tmp_path):
    detector = FakeTextDetector(text="MA3ERLF1S00123456")
    missing_dir = tmp_path / "not" / "created"
    service = ChassisService(text_detector=detector, storage=ImageStorage(missing_dir))

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.INTERNAL_ERROR
    assert outcome.detail.startswith("Could not save image")
    assert not missing_dir.exists()


class ThreadRecordingStorage(ImageStorage):
    def __init__(self, upload_dir):
        super().__init__(upload_dir)
        self.save_threads = []

    def save(self, content, original_filename):
        self.save_threads.append(threading.current_thread())
        return super().save(content, original_filename)


def test_image_is_saved_off_the_event_loop(test_settings):
    storage = ThreadRecordingStorage(test_settings.UPLOAD_DIR)
    storage.ensure_directory()
    detector = FakeTextDetector(text="MA3ERLF1S00123456")
    service = ChassisService(text_detector=detector, storage=storage)

    outcome = run(service, [make_image()])

    assert outcome.kind is OutcomeKind.SUCCESS
    assert len(storage.save_threads) == 1
    assert storage.save_threads[0] is not threading.main_thread()
