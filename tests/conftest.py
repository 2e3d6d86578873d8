import pytest

from posyandu_api import KelurahanOption


class FakeApi:
    """API palsu: mencatat semua panggilan dan bisa disetel untuk gagal."""

    def __init__(self, entity=None, options=None):
        self.entity = entity or {}
        self.options = options or []
        self.entity_error = None
        self.options_error = None
        self.update_error = None
        self.on_update = None
        self.get_calls = []
        self.options_calls = 0
        self.updates = []

    def get_posyandu(self, posyandu_id):
        self.get_calls.append(posyandu_id)
        if self.entity_error:
            raise self.entity_error
        return dict(self.entity)

    def list_wilayah_kerja(self):
        self.options_calls += 1
        if self.options_error:
            raise self.options_error
        return list(self.options)

    def update_posyandu(self, posyandu_id, payload):
        self.updates.append((posyandu_id, payload))
        if self.on_update:
            self.on_update()
        if self.update_error:
            raise self.update_error


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def success(self, message):
        self.messages.append(("success", message))

    def error(self, message):
        self.messages.append(("error", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def of(self, level):
        return [msg for lvl, msg in self.messages if lvl == level]


class RecordingNavigator:
    def __init__(self):
        self.to_list_calls = 0

    def to_list(self):
        self.to_list_calls += 1


@pytest.fixture
def melati():
    return {
        "id": 5,
        "nama": "Posyandu Melati",
        "alamat": "Jl. Mawar",
        "wilayah": "RW01",
        "kelurahanId": 3,
        "penanggungJawab": "Aisyah",
        "noHp": "0812...",
        "akreditasi": "MADYA",
        "longitude": 107.6,
        "latitude": -6.9,
    }


@pytest.fixture
def kelurahan_options():
    return [
        KelurahanOption(id=1, label="Cihapit"),
        KelurahanOption(id=3, label="Sukaluyu"),
        KelurahanOption(id=7, label="Tamansari"),
    ]


@pytest.fixture
def api(melati, kelurahan_options):
    return FakeApi(entity=melati, options=kelurahan_options)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def navigator():
    return RecordingNavigator()
