"""Tests for NarrationSync boundary handling and state transitions."""

import pytest
from PySide6.QtCore import QCoreApplication, Qt

from lingua_reader.io.database_manager import DEFAULT_WORD_REGEX
from lingua_reader.services import (
    NarrationState,
    NarrationSync,
    OffsetIndex,
    VoiceParams,
    tokenize,
    voice_params_for,
)

VOICE = VoiceParams(voice_hint="fr-FR", rate=0.9, pitch=1.2)

# "Hello , world ! Hello again ." -> offsets 0, 6, 8, 14, 16, 22, 28
OFFSET_OF = [0, 6, 8, 14, 16, 22, 28]


@pytest.fixture
def index():
    return OffsetIndex(tokenize("Hello, world! Hello again.", DEFAULT_WORD_REGEX))


@pytest.fixture
def sync(fake_engine):
    return NarrationSync(fake_engine, connection_type=Qt.DirectConnection)


@pytest.fixture
def events(sync):
    recorded = []
    sync.page_change_requested.connect(lambda page: recorded.append(("page", page)))
    sync.highlight_changed.connect(lambda index: recorded.append(("highlight", index)))
    sync.state_changed.connect(lambda state: recorded.append(("state", state)))
    sync.failed.connect(lambda message: recorded.append(("failed", message)))
    return recorded


def test_start_speaks_narration_text(sync, fake_engine, index, events):
    assert sync.start(index, page_size=2, displayed_page=0, voice=VOICE)

    assert fake_engine.spoken == [("Hello , world ! Hello again .", "fr-FR", 0.9, 1.2)]
    assert sync.state is NarrationState.SPEAKING
    assert events == [("state", "speaking")]


def test_boundary_highlights_token_on_displayed_page(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.word(OFFSET_OF[1])

    assert events == [("highlight", 1)]
    assert sync.current_index == 1


def test_page_change_is_requested_before_highlight(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.word(OFFSET_OF[2])
    fake_engine.word(OFFSET_OF[3])
    fake_engine.word(OFFSET_OF[4])

    assert events == [
        ("page", 1),
        ("highlight", 2),
        ("highlight", 3),
        ("page", 2),
        ("highlight", 4),
    ]


def test_boundary_inside_a_token_resolves_to_it(sync, fake_engine, index, events):
    sync.start(index, page_size=10, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.word(13)

    assert events == [("highlight", 2)]


def test_out_of_range_boundary_is_ignored(sync, fake_engine, index, events):
    sync.start(index, page_size=10, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.word(29)
    fake_engine.word(-3)

    assert events == []


def test_navigation_during_narration_updates_displayed_page(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    sync.set_displayed_page(1)
    events.clear()

    fake_engine.word(OFFSET_OF[2])

    assert events == [("highlight", 2)]


def test_stale_utterance_events_are_dropped(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    stale = fake_engine.last_utterance
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.word(OFFSET_OF[1], utterance_id=stale)
    fake_engine.finish(utterance_id=stale)

    assert events == []
    assert sync.state is NarrationState.SPEAKING


def test_pause_and_resume(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    sync.pause()
    sync.pause()
    sync.resume()

    assert fake_engine.calls == ["speak", "pause", "resume"]
    assert events == [("state", "speaking"), ("state", "paused"), ("state", "speaking")]


def test_resume_when_idle_does_nothing(sync, fake_engine):
    sync.resume()
    assert fake_engine.calls == []
    assert sync.state is NarrationState.IDLE


def test_stop_clears_highlight_and_is_idempotent(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    fake_engine.word(OFFSET_OF[0])
    events.clear()

    sync.stop()
    sync.stop()

    assert fake_engine.calls.count("cancel") == 1
    assert events == [("state", "idle"), ("highlight", -1)]
    assert sync.utterance_id is None


def test_events_after_stop_are_ignored(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    utterance = fake_engine.last_utterance
    sync.stop()
    events.clear()

    fake_engine.word(OFFSET_OF[2], utterance_id=utterance)

    assert events == []


def test_finished_returns_to_idle(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    fake_engine.word(OFFSET_OF[6])
    events.clear()

    fake_engine.finish()

    assert sync.state is NarrationState.IDLE
    assert events == [("state", "idle"), ("highlight", -1)]


def test_engine_failure_resets_and_reports(sync, fake_engine, index, events):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    events.clear()

    fake_engine.fail("audio device lost")

    assert sync.state is NarrationState.IDLE
    assert events == [("state", "idle"), ("failed", "audio device lost")]


def test_unavailable_engine_reports_and_stays_idle(unavailable_engine, index):
    sync = NarrationSync(unavailable_engine, connection_type=Qt.DirectConnection)
    availability = []
    sync.availability_changed.connect(availability.append)

    assert not sync.start(index, page_size=2, displayed_page=0, voice=VOICE)
    assert not sync.pronounce("bonjour", VOICE)

    assert availability == [False, False]
    assert sync.state is NarrationState.IDLE
    assert unavailable_engine.spoken == []


def test_pronounce_stops_article_narration(sync, fake_engine, index):
    sync.start(index, page_size=2, displayed_page=0, voice=VOICE)

    assert sync.pronounce("world", VOICE)

    assert sync.state is NarrationState.IDLE
    assert fake_engine.spoken[-1][0] == "world"
    assert fake_engine.calls == ["speak", "cancel", "speak"]


def test_queued_connection_defers_until_event_loop_runs(fake_engine, index):
    sync = NarrationSync(fake_engine)
    highlights = []
    sync.highlight_changed.connect(highlights.append)
    sync.start(index, page_size=10, displayed_page=0, voice=VOICE)

    fake_engine.word(OFFSET_OF[5])
    assert highlights == []

    QCoreApplication.processEvents()
    assert highlights == [5]


def test_numbers_are_spoken_and_words_still_resolve(sync, fake_engine, events):
    text = "In 1789, Paris rose."
    index = OffsetIndex(tokenize(text, DEFAULT_WORD_REGEX), text)

    sync.start(index, page_size=10, displayed_page=0, voice=VOICE)
    spoken = fake_engine.spoken[-1][0]
    fake_engine.word(spoken.index("Paris"))

    assert "1789" in spoken
    assert spoken == "In 1789 , Paris rose ."
    assert events == [("state", "speaking"), ("highlight", 2)]


def test_engine_is_required():
    with pytest.raises(ValueError):
        NarrationSync(None)


@pytest.mark.parametrize(
    "language, expected",
    [
        ("en", VoiceParams("en-US", 0.89, 1.19)),
        ("fr", VoiceParams("fr-FR", 0.9, 1.2)),
        ("pt-PT", VoiceParams("pt-BR", 0.9, 1.2)),
        ("pl", VoiceParams("pl", 0.9, 1.2)),
    ],
)
def test_voice_params_for(language, expected):
    assert voice_params_for(language) == expected
