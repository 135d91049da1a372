from yadokari.formatter import SLACK_MAX_BLOCKS, format_listings, render_limit, to_mrkdwn
from tests.fakes import make_listing


def test_empty_fresh_set_renders_nothing():
    assert format_listings([]) is None


def test_single_listing_layout():
    li = make_listing(
        "A",
        "85,000円",
        detailUrl="https://example.test/a",
        imageUrl="https://example.test/a.jpg",
        normalCommonFee="2,500円",
        unitType="2LDK",
        floorAreaText="55&#13217;",
        accessText="Line A<br>5 min<BR />walk",
        categoryLabel="Standard",
        regionLabel="Tokyo",
    )
    blocks = format_listings([li])

    assert [b["type"] for b in blocks] == ["section", "divider", "section", "section", "divider"]
    assert "New listings: 1 (Tokyo)" in blocks[0]["text"]["text"]

    title = blocks[2]
    assert title["text"]["text"] == "*<https://example.test/a|Unit A>*\nLine A\n5 min\nwalk"
    assert title["accessory"] == {"type": "image", "image_url": "https://example.test/a.jpg", "alt_text": "Unit A"}

    fields = [f["text"] for f in blocks[3]["fields"]]
    assert fields[0] == "*Rent*\n85,000円 (2,500円)"
    assert fields[1] == "*Discounted rent*\n-"
    assert fields[2] == "*Type / Area*\n2LDK / 55㎡"
    assert fields[3] == "*Category*\nStandard"


def test_listing_without_url_or_image():
    blocks = format_listings([make_listing("B")])
    title = blocks[2]
    assert title["text"]["text"].startswith("*Unit B*")
    assert "accessory" not in title


def test_bound_drops_listings_past_ten():
    fresh = [make_listing(str(i)) for i in range(15)]
    blocks = format_listings(fresh)

    titles = [b for b in blocks if b["type"] == "section" and "fields" not in b][1:]
    assert len(titles) == 10
    assert "Unit 9" in titles[-1]["text"]["text"]
    assert len(blocks) == 1 + 10 * 3 + 1
    assert len(blocks) <= SLACK_MAX_BLOCKS
    # the announcement counts everything that was fresh
    assert "New listings: 15" in blocks[0]["text"]["text"]


def test_limit_never_exceeds_block_ceiling():
    assert render_limit(100) == 16
    fresh = [make_listing(str(i)) for i in range(40)]
    assert len(format_listings(fresh, limit=100)) <= SLACK_MAX_BLOCKS


def test_to_mrkdwn():
    assert to_mrkdwn(None) == "-"
    assert to_mrkdwn("a<br/>b") == "a\nb"
    assert to_mrkdwn("40.5&#13217;") == "40.5㎡"


def test_slack_control_characters_are_escaped():
    assert to_mrkdwn("A & B <new>") == "A &amp; B &lt;new&gt;"
    # line breaks and the area symbol survive escaping
    assert to_mrkdwn("55&#13217;<br>1F") == "55㎡\n1F"


def test_name_cannot_break_the_link():
    li = make_listing("A", name="Heights > East", detailUrl="https://example.test/a")
    title = format_listings([li])[2]["text"]["text"]
    assert title.startswith("*<https://example.test/a|Heights &gt; East>*")
