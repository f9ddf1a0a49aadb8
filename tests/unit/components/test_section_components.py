from src.components.sections import (
    error_panel,
    render_faqs,
    render_judges,
    render_news,
    render_prizes,
    render_resources,
    render_sponsors,
    section_shell,
)
from src.components.sections.news import category_display, format_date
from src.components.sections.resources import format_file_size
from src.components.sections.shared import expandable_text, external_link, image_tag
from src.components.sections.sponsors import DEFAULT_RANK_COLOR, rank_color
from src.sections.domain.models import (
    AdditionalPrize,
    Faq,
    Judge,
    MainPrize,
    NewsItem,
    Resource,
    SectionOptions,
    Sponsor,
)
from src.sections.domain.theme import normalize_theme

THEME = normalize_theme()


class TestExpandableText:
    def test_short_text_is_shown_in_full(self):
        html = expandable_text("short")
        assert "<details" not in html
        assert "short" in html

    def test_long_text_gets_a_toggle(self):
        text = "x" * 120

        html = expandable_text(text)

        assert '<details class="remila-more">' in html
        assert f"<summary>{'x' * 80}…</summary>" in html
        # The full text is still there behind the toggle
        assert text in html

    def test_exactly_at_limit_is_not_truncated(self):
        assert "<details" not in expandable_text("y" * 80)

    def test_rich_text_counts_visible_characters(self):
        html = expandable_text("<p><strong>" + "z" * 70 + "</strong></p>", rich=True)
        assert "<details" not in html
        assert "<strong>" in html

    def test_plain_text_is_escaped(self):
        assert "&lt;b&gt;" in expandable_text("<b>")


class TestLinks:
    def test_unsafe_link_falls_back_to_text(self):
        assert external_link("javascript:alert(1)", "Click") == "Click"

    def test_external_link(self):
        html = external_link("https://acme.test", "Acme")
        assert 'href="https://acme.test"' in html
        assert 'target="_blank"' in html

    def test_image_requires_safe_source(self):
        assert image_tag("javascript:x", "alt") == ""
        assert image_tag(None, "alt") == ""
        assert 'src="https://cdn.test/a.png"' in image_tag("https://cdn.test/a.png", "A")


class TestShell:
    def test_title_can_be_hidden(self):
        shown = section_shell("news", "<p/>", SectionOptions(siteSlug="a"), THEME, title="NEWS")
        hidden = section_shell(
            "news", "<p/>", SectionOptions(siteSlug="a", showTitle=False), THEME, title="NEWS"
        )
        assert "<h2>NEWS</h2>" in shown
        assert "<h2>" not in hidden

    def test_animation_and_class_name(self):
        html = section_shell(
            "faq",
            "",
            SectionOptions(siteSlug="a", enableAnimation=False, className="mine"),
            THEME,
            title="FAQ",
        )
        assert 'class="remila-section remila-faq mine"' in html

    def test_theme_colors_become_css_variables(self):
        theme = normalize_theme({"colors": {"primary": "#123456"}})
        html = section_shell("news", "", SectionOptions(siteSlug="a"), theme, title="N")
        assert "--primary-color: #123456" in html

    def test_error_panel_escapes_message(self):
        assert "&lt;script&gt;" in error_panel("<script>")


class TestNews:
    def test_category_record_wins_over_legacy_text(self):
        item = NewsItem.model_validate(
            {
                "id": "1",
                "title": "T",
                "category": "press",
                "news_category": {"name": "Campaign", "color": "#ff0000"},
            }
        )
        assert category_display(item, THEME) == ("Campaign", "#ff0000")

    def test_legacy_category_fallback(self):
        item = NewsItem(id="1", title="T", category="event")
        assert category_display(item, THEME) == ("Event", "#f59e0b")

    def test_unknown_category_uses_theme_primary(self):
        item = NewsItem(id="1", title="T", category="misc")
        assert category_display(item, THEME)[1] == THEME.colors.primary

    def test_format_date(self):
        assert format_date("2024-05-01T09:00:00+00:00") == "2024.05.01"
        assert format_date(None) == ""

    def test_render_sanitizes_content(self):
        item = NewsItem(
            id="1",
            title="<Launch>",
            content="<p>Hi</p><script>x()</script>",
            link_url="https://acme.test",
            link_text="More",
        )
        html = render_news([item], THEME)
        assert "<script>" not in html
        assert "&lt;Launch&gt;" in html
        assert 'href="https://acme.test"' in html


class TestSponsors:
    def test_rank_colors(self):
        assert rank_color("ゴールド") == "#eab308"
        assert rank_color("Gold") == "#eab308"
        assert rank_color("Platinum") == DEFAULT_RANK_COLOR

    def test_render(self):
        html = render_sponsors(
            [Sponsor(id="s1", name="Acme", rank="gold", url="https://acme.test", award="Acme Award")]
        )
        assert "Acme Award" in html
        assert 'href="https://acme.test"' in html


class TestResources:
    def test_format_file_size(self):
        assert format_file_size(0) == ""
        assert format_file_size(512) == "512 B"
        assert format_file_size(2048) == "2.0 KB"
        assert format_file_size(5 * 1024 * 1024) == "5.0 MB"

    def test_render_download_link(self):
        html = render_resources(
            [
                Resource(
                    id="r1",
                    title="Guide",
                    file_url="https://files.test/guide.pdf",
                    file_type="pdf",
                    file_size=2048,
                )
            ]
        )
        assert "PDF" in html
        assert "2.0 KB" in html
        assert 'class="remila-download"' in html

    def test_tracked_download_goes_through_route(self):
        resource = Resource(id="r1", title="Guide", file_url="https://files.test/guide.pdf")

        html = render_resources([resource], download_route="embed", site_slug="acme")

        assert 'href="embed?download=r1&amp;siteSlug=acme"' in html
        assert "files.test" not in html
        assert " download " not in html

    def test_unsafe_download_url_is_dropped(self):
        html = render_resources([Resource(id="r1", title="Bad", file_url="javascript:x")])
        assert "remila-download" not in html


class TestOtherSections:
    def test_judge_instagram_handle(self):
        html = render_judges([Judge(id="j1", name="Aiko", instagram="@aiko.hair")])
        assert "https://www.instagram.com/aiko.hair/" in html
        assert "@aiko.hair" in html

    def test_prizes_show_both_groups(self):
        html = render_prizes(
            [MainPrize(id="m1", title="Grand Prix", amount="¥100,000")],
            [AdditionalPrize(id="a1", name="Special Award")],
        )
        assert "Grand Prix" in html
        assert "Additional Prizes" in html
        assert "Special Award" in html

    def test_faq_answers_are_collapsed_and_sanitized(self):
        html = render_faqs([Faq(id="f1", question="When?", answer="<p>May</p><iframe></iframe>")])
        assert "<details" in html
        assert "<p>May</p>" in html
        assert "<iframe" not in html
