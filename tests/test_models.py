from app.models.profile import ProfileMetadata, ProfileRecord


def test_metadata_blank_strings_become_none():
    m = ProfileMetadata(name="  ", title="Designer", company_name="", avatar_url=None)
    assert m.name is None
    assert m.title == "Designer"
    assert m.company_name is None


def test_record_ignores_unknown_columns():
    r = ProfileRecord.model_validate({"name": "Ann", "user_code": "abc", "bio": "hi"})
    assert r.name == "Ann"
    assert r.custom_fields is None


def test_record_profile_image_payload():
    r = ProfileRecord(custom_fields={"profileImage": "https://x/y.png"})
    assert r.profile_image_payload() == "https://x/y.png"
    assert ProfileRecord(custom_fields="oops").profile_image_payload() is None
    assert ProfileRecord().profile_image_payload() is None
