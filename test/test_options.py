# SPDX-License-Identifier: MIT

import unittest
from ipaddress import IPv4Address

from dhcpwire.error import (OptionParseError, OptionValueError,
	OptionConversionError, OptionNotFoundError)
from dhcpwire.option_codecs import OptionKind
from dhcpwire.v4 import option_codecs
from dhcpwire.v4 import (Option, OptionSet, RFC2132OptionType, MessageType,
	ClientIdentifier, encode_option)


class TestOption(unittest.TestCase):
	def test_coerced_on_construction(self):
		self.assertIs(Option(53, 5).value, MessageType.ACK)
		self.assertIs(Option(53, 5).tag, RFC2132OptionType.MESSAGE_TYPE)
		self.assertEqual(Option(3, ['10.0.0.1']).value,
			[IPv4Address('10.0.0.1')])
		self.assertEqual(Option(61, b'\x01\x00\x0b').value,
			ClientIdentifier(1, b'\x00\x0b'))
		self.assertEqual(Option(55, [1, 3, 6]).value, b'\x01\x03\x06')
		self.assertEqual(Option(12, b'host').value, 'host')

	def test_bad_values(self):
		with self.assertRaises(OptionConversionError):
			Option(12, 'h\xf6st')
		with self.assertRaises(OptionConversionError):
			Option(13, 70000)
		with self.assertRaises(OptionConversionError):
			Option(3, '10.0.0.1')
		with self.assertRaises(OptionConversionError):
			Option(55, 5)
		with self.assertRaises(OptionValueError):
			Option(3, [])
		with self.assertRaises(OptionValueError):
			Option(12, '')
		with self.assertRaises(OptionConversionError):
			Option(256, b'')
		for tag in (46, 52, 53):
			with self.subTest(tag=tag):
				with self.assertRaises(OptionConversionError):
					Option(tag, True)

	def test_typed_accessors(self):
		self.assertEqual(Option(1, '255.255.255.0').as_ipv4(),
			IPv4Address('255.255.255.0'))
		self.assertEqual(Option(6, ['1.1.1.1']).as_ipv4_list(),
			[IPv4Address('1.1.1.1')])
		self.assertEqual(Option(15, 'example.org').as_text(), 'example.org')
		self.assertIs(Option(19, 1).as_bool(), True)
		self.assertEqual(Option(53, MessageType.NAK).as_int(), 6)
		self.assertEqual(Option(25, [576, 1500]).as_int_list(), [576, 1500])
		self.assertEqual(Option(60, b'PXEClient').as_bytes(), b'PXEClient')

	def test_accessor_kind_mismatch(self):
		option = Option(1, '255.255.255.0')
		self.assertIs(option.kind, OptionKind.IPV4)
		with self.assertRaises(OptionConversionError):
			option.as_text()
		with self.assertRaises(OptionConversionError):
			option.as_int()

	def test_decode_matches_constructor(self):
		option = Option(51, 86400)
		payload = option.encode()[2:]
		self.assertEqual(Option.decode(51, payload), option)


class TestOptionSet(unittest.TestCase):
	def test_ascending_serialization(self):
		options = OptionSet()
		options[55] = [1, 3]
		options[53] = MessageType.DISCOVER
		options[1] = '255.255.255.0'
		self.assertEqual(options.tags(), [1, 53, 55])
		self.assertEqual(options.to_bytes(),
			encode_option(1, IPv4Address('255.255.255.0'))
			+ bytes([53, 1, 1, 55, 2, 1, 3, 255]))

	def test_empty_set_is_just_end(self):
		self.assertEqual(OptionSet().to_bytes(), b'\xff')

	def test_upsert_and_remove(self):
		options = OptionSet()
		options.upsert(Option(51, 60))
		options.upsert(Option(51, 120))
		self.assertEqual(options[51], 120)
		self.assertEqual(len(options), 1)
		options.upsert_optional(None)
		self.assertEqual(len(options), 1)
		options.remove(51)
		options.remove(51)
		self.assertNotIn(51, options)
		self.assertEqual(len(options), 0)

	def test_pad_and_end_are_not_stored(self):
		options = OptionSet()
		options[RFC2132OptionType.PAD] = None
		options.upsert(Option(RFC2132OptionType.END))
		self.assertEqual(len(options), 0)

	def test_merge_overwrites(self):
		options = OptionSet({51: 60, 53: 1})
		options.merge({51: 120, 54: '10.0.0.1'})
		self.assertEqual(options.items(), [
			(RFC2132OptionType.IP_ADDRESS_LEASE_TIME, 120),
			(RFC2132OptionType.MESSAGE_TYPE, MessageType.DISCOVER),
			(RFC2132OptionType.SERVER_IDENTIFIER, IPv4Address('10.0.0.1')),
		])

	def test_lookup(self):
		options = OptionSet([Option(51, 60)])
		self.assertEqual(options.get(51), 60)
		self.assertIsNone(options.get(54))
		self.assertEqual(options.get(54, 'none'), 'none')
		self.assertEqual(options.option(51), Option(51, 60))
		self.assertEqual(options.require(51, OptionKind.UINT32), 60)
		with self.assertRaises(OptionConversionError):
			options.require(51, OptionKind.IPV4)
		with self.assertRaises(OptionNotFoundError) as cm:
			options[54]
		self.assertEqual(cm.exception.tag, 54)
		with self.assertRaises(LookupError):
			del options[54]

	def test_copy_is_independent(self):
		options = OptionSet({3: ['10.0.0.1']})
		duplicate = options.copy()
		duplicate[3].append(IPv4Address('10.0.0.2'))
		self.assertEqual(options[3], [IPv4Address('10.0.0.1')])
		self.assertNotEqual(options, duplicate)

	def test_rejects_other_iterables(self):
		with self.assertRaises(TypeError):
			OptionSet([(51, 60)])


class TestOptionStream(unittest.TestCase):
	def test_pad_and_end(self):
		options = OptionSet.from_bytes(
			bytes([0, 0, 53, 1, 1, 0, 255, 51, 4, 0, 0, 0, 60]))
		self.assertEqual(options.items(),
			[(RFC2132OptionType.MESSAGE_TYPE, MessageType.DISCOVER)])

	def test_missing_end_is_accepted(self):
		with self.assertLogs('dhcpwire.v4.options', 'DEBUG'):
			options = OptionSet.from_bytes(bytes([53, 1, 2]))
		self.assertEqual(options[53], MessageType.OFFER)

	def test_missing_length_byte(self):
		with self.assertRaises(OptionParseError) as cm:
			OptionSet.from_bytes(bytes([53, 1, 2, 51]))
		self.assertEqual(cm.exception.tag, 51)

	def test_payload_overrun(self):
		with self.assertRaises(OptionParseError) as cm:
			OptionSet.from_bytes(bytes([53, 1, 2, 51, 4, 0, 0, 255]))
		self.assertEqual(cm.exception.tag, 51)

	def test_repeated_tags_are_concatenated(self):
		data = bytes([6, 4, 8, 8, 8, 8, 53, 1, 1, 6, 4, 1, 1, 1, 1, 255])
		options = OptionSet.from_bytes(data)
		self.assertEqual(options[6],
			[IPv4Address('8.8.8.8'), IPv4Address('1.1.1.1')])

	def test_split_payload_round_trips(self):
		vendor = bytes(range(256))*2
		options = OptionSet({43: vendor})
		self.assertEqual(OptionSet.from_bytes(options.to_bytes()), options)

	def test_concatenation_happens_before_decoding(self):
		# an address split across two runs is only valid once joined
		data = bytes([54, 2, 10, 0, 54, 2, 0, 1, 255])
		options = OptionSet.from_bytes(data)
		self.assertEqual(options[54], IPv4Address('10.0.0.1'))

	def test_unknown_tags_are_raw(self):
		with self.assertLogs('dhcpwire.v4.options', 'DEBUG'):
			options = OptionSet.from_bytes(bytes([250, 2, 1, 2, 255]))
		self.assertEqual(options[250], b'\x01\x02')

	def test_first_bad_option_aborts(self):
		with self.assertRaises(OptionParseError) as cm:
			OptionSet.from_bytes(bytes([53, 1, 9, 51, 1, 0, 255]))
		self.assertEqual(cm.exception.tag, 53)


SAMPLE_VALUES = {
	OptionKind.EMPTY: None,
	OptionKind.IPV4: IPv4Address('10.0.0.1'),
	OptionKind.IPV4_LIST: [IPv4Address('10.0.0.1'), IPv4Address('10.0.0.2')],
	OptionKind.IPV4_PAIRS: [
		(IPv4Address('10.1.0.0'), IPv4Address('10.0.0.1')),
	],
	OptionKind.TEXT: 'wolf',
	OptionKind.BOOL: True,
	OptionKind.UINT8: 64,
	OptionKind.UINT16: 1500,
	OptionKind.UINT32: 7200,
	OptionKind.INT32: -3600,
	OptionKind.UINT16_LIST: [576, 1500],
	OptionKind.BYTES: b'\x01\x03\x06',
	OptionKind.ENUM: 1,
	OptionKind.CLIENT_IDENTIFIER: (1, b'\x00\x0b\x82\x01\xfc\x42'),
	OptionKind.SUBOPTIONS: [(1, b'eth0'), (2, b'\x00\x0b')],
}


class TestRoundTrip(unittest.TestCase):
	def test_every_tag(self):
		for tag in range(1, 255):
			kind = option_codecs.kind(tag)
			with self.subTest(tag=tag, kind=kind):
				option = Option(tag, SAMPLE_VALUES[kind])
				encoded = option.encode()
				self.assertEqual(encoded[0], tag)
				self.assertEqual(encoded[1], len(encoded) - 2)
				parsed = OptionSet.from_bytes(encoded + b'\xff')
				self.assertEqual(parsed.option(tag), option)


if __name__ == '__main__':
	unittest.main()

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
