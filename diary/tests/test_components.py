import pytest
from datetime import date

from diary.client.entry_list import EMPTY_MESSAGE, DiaryList, format_entry_date
from diary.client.form import DiaryForm
from diary.client.mood_chart import MoodChart

def _fill(form, **overrides):
    values = {
        "date": "2024-01-01",
        "mood": 6,
        "learned": "Pace yourself",
        "improvements": "Fewer meetings",
        "lookingForward": "Friday",
        "news": "Quiet day",
    }
    values.update(overrides)
    for name, value in values.items():
        form.set_field(name, value)
    form.set_gratitude(0, "Tea")

# --- Form ---

def test_new_form_defaults():
    form = DiaryForm(lambda payload: None)

    assert form.draft["date"] == date.today().isoformat()
    assert form.draft["mood"] == 5
    assert form.draft["gratitude"] == ["", "", ""]
    assert not form.is_editing

def test_form_validation_order():
    form = DiaryForm(lambda payload: None)
    form.set_field("date", "")
    form.set_field("mood", 12)

    assert form.validate() == "Please choose a date"

    form.set_field("date", "2024-01-01")
    assert form.validate() == "Mood must be between 1 and 10"

    form.set_field("mood", 4)
    assert form.validate() == "Please enter what you learned today"

    form.set_field("learned", "x")
    form.set_field("improvements", "y")
    assert form.validate() == "Please enter at least one thing you are grateful for"

    form.set_gratitude(1, "Rain")
    assert form.validate() == "Please enter what you are looking forward to"

    form.set_field("lookingForward", "z")
    assert form.validate() == "Please enter today's news"

    form.set_field("news", "n")
    assert form.validate() is None

def test_submit_blocks_invalid_draft():
    saved = []
    form = DiaryForm(saved.append)
    _fill(form, learned="   ")

    assert form.submit() is False
    assert form.error == "Please enter what you learned today"
    assert saved == []

def test_submit_filters_blank_gratitude():
    saved = []
    form = DiaryForm(saved.append)
    _fill(form)
    form.set_gratitude(2, "Music")

    assert form.submit() is True
    assert form.error is None
    assert saved == [{
        "date": "2024-01-01",
        "mood": 6,
        "learned": "Pace yourself",
        "improvements": "Fewer meetings",
        "gratitude": ["Tea", "Music"],
        "lookingForward": "Friday",
        "news": "Quiet day",
    }]

def test_submit_refused_while_save_in_flight():
    calls = []
    form = DiaryForm(lambda payload: calls.append(form.submit()))
    _fill(form)

    assert form.submit() is True
    # The nested submit ran while the first save was still in progress
    assert calls == [False]
    assert not form.is_submitting

def test_submit_reports_a_failed_save():
    saved = []
    form = DiaryForm(lambda payload: saved.append(payload) or False)
    _fill(form)

    assert form.submit() is False
    assert len(saved) == 1
    assert form.error is None
    assert not form.is_submitting

def test_submit_clears_flag_when_save_fails():
    def failing_save(payload):
        raise RuntimeError("network down")

    form = DiaryForm(failing_save)
    _fill(form)

    with pytest.raises(RuntimeError):
        form.submit()
    assert not form.is_submitting

def test_edit_form_starts_from_entry():
    entry = {
        "id": "entry-1",
        "date": "2024-02-03",
        "mood": 8,
        "learned": "a",
        "improvements": "b",
        "gratitude": ["c"],
        "lookingForward": "d",
        "news": "e",
        "createdAt": "2024-02-03T10:00:00",
    }
    saved = []
    form = DiaryForm(saved.append, initial=entry)

    assert form.is_editing
    assert form.draft["gratitude"] == ["c", "", ""]
    assert "createdAt" not in form.draft

    form.set_field("mood", 3)
    assert form.submit()
    assert saved[0]["id"] == "entry-1"
    assert saved[0]["mood"] == 3
    assert saved[0]["gratitude"] == ["c"]

def test_uncapped_form_still_offers_three_slots():
    form = DiaryForm(lambda payload: None, max_gratitude=None)

    assert form.slots == 3
    form.set_gratitude(4, "fifth")
    assert form.draft["gratitude"] == ["", "", "", "", "fifth"]

def test_set_unknown_field():
    form = DiaryForm(lambda payload: None)

    with pytest.raises(KeyError):
        form.set_field("title", "nope")

# --- List ---

ENTRIES = [
    {"id": "2", "date": "2024-01-02", "mood": 4, "learned": "l2", "improvements": "i2",
     "gratitude": ["g2"], "lookingForward": "f2", "news": "n2"},
    {"id": "1", "date": "2024-01-01", "mood": 9, "learned": "l1", "improvements": "i1",
     "gratitude": ["g1a", "g1b"], "lookingForward": "f1", "news": "n1"},
]

def test_empty_list_renders_empty_state():
    entry_list = DiaryList([], on_edit=None, on_delete=None)

    assert entry_list.is_empty
    assert entry_list.cards() == []
    assert entry_list.render_text() == EMPTY_MESSAGE

def test_list_cards_and_text():
    entry_list = DiaryList(ENTRIES, on_edit=None, on_delete=None)

    cards = entry_list.cards()
    assert [card.id for card in cards] == ["2", "1"]
    assert cards[1].date == "Monday, January 01, 2024"
    assert cards[1].gratitude == ["g1a", "g1b"]

    text = entry_list.render_text()
    assert "[1] Tuesday, January 02, 2024  mood 4/10" in text
    assert "      - g1b" in text

def test_list_actions_forward_to_parent():
    edited, deleted = [], []
    entry_list = DiaryList(ENTRIES, on_edit=edited.append, on_delete=deleted.append)

    assert entry_list.edit("1") is True
    assert entry_list.delete("2") is True
    assert entry_list.delete("missing") is False
    assert edited == [ENTRIES[1]]
    assert deleted == ["2"]

def test_list_actions_disabled_during_mutation():
    edited, deleted = [], []
    entry_list = DiaryList(ENTRIES, on_edit=edited.append, on_delete=deleted.append, disabled=True)

    assert entry_list.edit("1") is False
    assert entry_list.delete("1") is False
    assert edited == [] and deleted == []

def test_format_entry_date_falls_back_to_raw_value():
    assert format_entry_date("2024-12-25T08:00:00Z") == "Wednesday, December 25, 2024"
    assert format_entry_date("someday") == "someday"

# --- Chart ---

def test_chart_points_are_chronological():
    chart = MoodChart(ENTRIES)

    assert chart.points() == [(date(2024, 1, 1), 9), (date(2024, 1, 2), 4)]
    assert chart.labels() == ["01/01", "01/02"]

def test_chart_config_has_fixed_axis():
    config = MoodChart(ENTRIES).config()

    assert config["data"]["datasets"][0]["data"] == [9, 4]
    assert config["options"]["scales"]["y"] == {"min": 1, "max": 10, "ticks": {"stepSize": 1}}
    assert MoodChart.ticks() == list(range(1, 11))

def test_chart_text_rendering():
    text = MoodChart(ENTRIES).render_text().splitlines()

    assert text[0] == "Mood trend"
    assert text[1].startswith("10 |")
    assert text[2].startswith(" 9 |") and "*" in text[2]
    assert "*" in text[7]  # mood 4
    assert text[-1].split() == ["01/01", "01/02"]

def test_chart_without_entries():
    chart = MoodChart([])

    assert chart.points() == []
    assert chart.render_text() == "Mood trend: no data"
