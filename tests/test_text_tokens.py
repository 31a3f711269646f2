from memebot.tools.text_tokens import extract_commands, extract_tags, strip_tags


class TestExtractCommands:
    def test_multiple_commands_in_order(self):
        assert extract_commands("/add foo /search") == ["add", "search"]

    def test_single_command(self):
        assert extract_commands("/ok") == ["ok"]

    def test_slash_inside_word_is_not_a_command(self):
        assert extract_commands("a/b") == []
        assert extract_commands("not/a/command") == []

    def test_second_slash_disqualifies_word(self):
        assert extract_commands("/a/b /search") == ["search"]

    def test_case_sensitive(self):
        assert extract_commands("/Search cats") == ["Search"]

    def test_empty_and_none(self):
        assert extract_commands("") == []
        assert extract_commands(None) == []

    def test_only_single_spaces_split(self):
        assert extract_commands("/search  cats") == ["search"]


class TestExtractTags:
    def test_tags_in_order(self):
        assert extract_tags("hello #cat #dog world") == ["cat", "dog"]

    def test_hash_inside_word_is_not_a_tag(self):
        assert extract_tags("c#sharp #a#b #ok") == ["ok"]

    def test_none_caption(self):
        assert extract_tags(None) == []


class TestStripTags:
    def test_removes_tag_tokens_only(self):
        assert strip_tags("hello #cat #dog world", ["cat", "dog"]) == "hello   world"

    def test_caption_description(self):
        caption = "funny #meme #cat"
        assert strip_tags(caption, extract_tags(caption)).strip() == "funny"

    def test_tag_at_start_is_removed(self):
        assert strip_tags("#cat funny", ["cat"]) == " funny"

    def test_missing_tag_is_skipped(self):
        assert strip_tags("hello world", ["cat"]) == "hello world"

    def test_removes_first_occurrence_only(self):
        assert strip_tags("#cat and #cat", ["cat"]) == " and #cat"

    def test_overlapping_tags_depend_on_order(self):
        assert strip_tags("#cat #ca", ["cat", "ca"]) == " "
        # "#ca" first matches inside "#cat", leaving "#cat" unmatched.
        assert strip_tags("#cat #ca", ["ca", "cat"]) == "t #ca"

    def test_none_text(self):
        assert strip_tags(None, ["cat"]) == ""
