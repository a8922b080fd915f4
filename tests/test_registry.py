import os
from unittest import TestCase

from cloudsync.util.wine.registry import RegistryEntry, WineRegistryKey, WineRegistryParser, decode_value, unescape_value

FIXTURES_PATH = os.path.join(os.path.dirname(__file__), 'fixtures')


class TestWineRegistryParser(TestCase):
    def setUp(self):
        with open(os.path.join(FIXTURES_PATH, 'user.reg'), encoding='utf-8') as reg_file:
            self.entries = WineRegistryParser().parse(reg_file.read())
        self.values = {entry.path: entry.values for entry in self.entries}

    def test_entries_keep_file_order(self):
        self.assertEqual(
            [entry.path for entry in self.entries],
            [
                'Control Panel/Desktop',
                'Control Panel/Sound',
                'Environment',
                'Software/Wine/Fonts',
                'Software/Wine/Multiline',
                'Volatile Environment',
            ]
        )

    def test_entry_values_are_decoded(self):
        volatile = self.entries[-1]
        self.assertIsInstance(volatile, RegistryEntry)
        self.assertEqual(volatile.values['USERPROFILE'], 'C:\\users\\steamuser')
        self.assertEqual(volatile.values['USERNAME'], 'steamuser')

    def test_dword_value(self):
        self.assertEqual(self.values['Control Panel/Desktop']['CaretWidth'], '1')
        self.assertEqual(self.values['Control Panel/Desktop']['DragWidth'], '4')

    def test_metas_are_not_values(self):
        self.assertNotIn('time', self.values['Control Panel/Sound'])

    def test_continued_lines_are_joined(self):
        multiline = self.values['Software/Wine/Multiline']
        self.assertEqual(multiline['Data'], 'hex:01,02,03,\\\n  04,05,06')
        self.assertEqual(multiline['After'], 'yes')

    def test_windows_line_endings(self):
        content = 'WINE REGISTRY Version 2\r\n\r\n[Volatile Environment] 1700000000\r\n"USERPROFILE"="C:\\\\users\\\\x"\r\n'
        entries = WineRegistryParser().parse(content)
        self.assertEqual(entries, [RegistryEntry(path='Volatile Environment', values={'USERPROFILE': 'C:\\users\\x'})])

    def test_header_suffix_is_ignored(self):
        content = (
            '[Software\\\\Foo] not-a-timestamp\n'
            '"A"="b"\n'
            '[Volatile Environment]\n'
            '"USERPROFILE"="C:\\\\users\\\\x"\n'
        )
        entries = WineRegistryParser().parse(content)
        self.assertEqual(
            entries,
            [
                RegistryEntry(path='Software/Foo', values={'A': 'b'}),
                RegistryEntry(path='Volatile Environment', values={'USERPROFILE': 'C:\\users\\x'}),
            ]
        )

    def test_empty_content(self):
        self.assertEqual(WineRegistryParser().parse(''), [])


class TestWineRegistryKey(TestCase):
    def test_creation_by_key_def_parses(self):
        key = WineRegistryKey(key_def='[Control Panel\\\\Desktop] 1477412318')
        self.assertEqual(key.name, 'Control Panel/Desktop')

    def test_creation_without_timestamp(self):
        key = WineRegistryKey(key_def='[Volatile Environment]')
        self.assertEqual(key.name, 'Volatile Environment')

    def test_parse_registry_key(self):
        key = WineRegistryKey(key_def='[Control Panel\\\\Desktop] 1477412318')
        key.parse('"C:\\\\users\\\\strider\\\\My Music\\\\iTunes\\\\iTunes Music\\\\Podcasts\\\\"=dword:00000001')
        self.assertEqual(key.subkeys["C:\\\\users\\\\strider\\\\My Music\\\\iTunes\\\\iTunes Music\\\\Podcasts\\\\"],
                         'dword:00000001')

        key.parse('"A"=val')
        self.assertEqual(key.subkeys["A"], 'val')

        key.parse('"String with \\"quotes\\""=val')
        self.assertEqual(key.subkeys['String with \\"quotes\\"'], 'val')

        key.parse('@="default value"')
        self.assertEqual(key.subkeys['default'], '"default value"')

    def test_short_lines_are_ignored(self):
        key = WineRegistryKey(key_def='[Control Panel\\\\Desktop] 1477412318')
        key.parse('"A"')
        key.parse('')
        self.assertEqual(len(key.subkeys), 0)


class TestValueDecoding(TestCase):
    def test_unescape_value(self):
        self.assertEqual(unescape_value('C:\\\\users\\\\x'), 'C:\\users\\x')
        self.assertEqual(unescape_value('say \\"hi\\"'), 'say "hi"')
        self.assertEqual(unescape_value('a\\nb'), 'a\nb')

    def test_decode_value(self):
        self.assertEqual(decode_value('"plain"'), 'plain')
        self.assertEqual(decode_value('str(2):"%USERPROFILE%\\\\Temp"'), '%USERPROFILE%\\Temp')
        self.assertEqual(decode_value('dword:0000001f'), '31')
        self.assertEqual(decode_value('hex:01,02'), 'hex:01,02')
