from app.services.crawler_detection import DEFAULT_CRAWLER_SIGNATURES, is_crawler


def test_known_preview_bots_are_detected():
    assert is_crawler("facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)")
    assert is_crawler("Twitterbot/1.0")
    assert is_crawler("Mozilla/5.0 (compatible; Discordbot/2.0; +https://discordapp.com)")
    assert is_crawler("WhatsApp/2.23.20.0 A")


def test_detection_is_case_insensitive_and_position_independent():
    assert is_crawler("TWITTERBOT")
    assert is_crawler("prefix linkedinbot suffix")
    for sig in DEFAULT_CRAWLER_SIGNATURES:
        assert is_crawler(f"Mozilla/5.0 {sig.upper()}/1.0")


def test_humans_and_empty_values_are_not_crawlers():
    assert is_crawler("") is False
    assert is_crawler(None) is False
    assert is_crawler(
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Version/17.0 Mobile Safari/604.1"
    ) is False


def test_zalo_in_app_browser_is_not_a_crawler():
    assert is_crawler("Mozilla/5.0 (Linux; Android 13) Chrome/116.0 Mobile Safari/537.36 Zalo android/12100") is False
    assert is_crawler("ZaloPreviewBot/1.0") is True


def test_custom_signature_list():
    assert is_crawler("MyPreviewFetcher/3", signatures=("mypreviewfetcher",))
    assert is_crawler("Twitterbot/1.0", signatures=("mypreviewfetcher",)) is False
