"""Tests for the key-usage extractor."""

from i18n_finder.config import FinderConfig


def keys(usages):
    return [u.key for u in usages]


class TestExtractKeyUsages:
    """Static first arguments of translation calls."""

    def test_direct_call(self, usages_of) -> None:
        usages = usages_of("t('home.title');")
        assert keys(usages) == ["home.title"]
        assert usages[0].invoked_function == "t"
        assert (usages[0].line, usages[0].column) == (1, 2)

    def test_column_after_non_ascii_text(self, usages_of) -> None:
        line = "const s = 'Größe: ' + t('size.label');"
        usages = usages_of(line)
        assert usages[0].column == line.index("'size.label'")

    def test_member_call(self, usages_of) -> None:
        usages = usages_of("i18n.t(\"home.subtitle\");")
        assert keys(usages) == ["home.subtitle"]
        assert usages[0].invoked_function == "t"

    def test_static_template(self, usages_of) -> None:
        assert keys(usages_of("translate(`nav.back`);")) == ["nav.back"]

    def test_dynamic_arguments_skipped(self, usages_of) -> None:
        source = """
        t(key);
        t(`home.${section}`);
        t('a' + 'b');
        t();
        """
        assert usages_of(source) == []

    def test_other_functions_ignored(self, usages_of) -> None:
        assert usages_of("format('home.title'); obj.get('x');") == []

    def test_tagged_template_ignored(self, usages_of) -> None:
        assert usages_of("t`home.title`;") == []

    def test_every_call_site_recorded(self, usages_of) -> None:
        source = """
        const A = () => (
          <View>
            <Text>{t('common.ok')}</Text>
            <Button title={t('common.ok')} />
          </View>
        );
        """
        usages = usages_of(source)
        assert keys(usages) == ["common.ok", "common.ok"]
        assert usages[0].line < usages[1].line

    def test_custom_function_names(self, usages_of) -> None:
        cfg = FinderConfig(i18n_function_names=["tr"])
        assert keys(usages_of("tr('a.b'); t('c.d');", cfg=cfg)) == ["a.b"]

    def test_typescript_generic_call(self, usages_of) -> None:
        assert keys(usages_of("const s: string = t<string>('typed.key');", suffix=".ts")) == ["typed.key"]
