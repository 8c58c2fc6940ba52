import json

from careerflow.storage import LocalStore


def test_missing_key_loads_empty(local_store):
    assert not local_store.contains("career_jobs")
    assert local_store.load("career_jobs") == []


def test_save_then_load(local_store):
    records = [{"id": "1", "title": "Engineer"}, {"id": "2", "title": "Designer"}]

    local_store.save("career_jobs", records)

    assert local_store.contains("career_jobs")
    assert local_store.load("career_jobs") == records


def test_save_replaces_previous_value(local_store):
    local_store.save("career_jobs", [{"id": "1"}])
    local_store.save("career_jobs", [])

    assert local_store.contains("career_jobs")
    assert local_store.load("career_jobs") == []


def test_malformed_json_loads_empty(tmp_path):
    store = LocalStore(tmp_path)
    (tmp_path / "career_jobs.json").write_text("{not json", encoding="utf-8")

    assert store.load("career_jobs") == []


def test_non_list_value_loads_empty(tmp_path):
    store = LocalStore(tmp_path)
    (tmp_path / "career_jobs.json").write_text(json.dumps({"id": "1"}), encoding="utf-8")

    assert store.load("career_jobs") == []


def test_unserializable_records_are_not_raised(local_store):
    local_store.save("career_jobs", [{"id": "1"}])

    local_store.save("career_jobs", [{"id": object()}])

    assert local_store.load("career_jobs") == [{"id": "1"}]


def test_unwritable_directory_is_not_raised(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = LocalStore(blocker / "storage")

    store.save("career_jobs", [{"id": "1"}])

    assert store.load("career_jobs") == []


def test_keys_are_sanitized_to_file_names(local_store):
    local_store.save("../escape/key", [{"id": "1"}])

    assert local_store.load("../escape/key") == [{"id": "1"}]
    assert [p.parent for p in local_store.root_dir.iterdir()] == [local_store.root_dir]


def test_string_items(local_store):
    assert local_store.get_item("careerflow_sb_url") is None

    local_store.set_item("careerflow_sb_url", "https://example.supabase.co")
    assert local_store.get_item("careerflow_sb_url") == "https://example.supabase.co"

    local_store.remove_item("careerflow_sb_url")
    assert local_store.get_item("careerflow_sb_url") is None
    local_store.remove_item("careerflow_sb_url")
