# SPDX-License-Identifier: MIT

import enum
import struct
import unittest
from ipaddress import IPv4Address

from dhcpwire.error import (OptionParseError, OptionValueError,
	OptionConversionError)
from dhcpwire.option_codecs import Codec, OptionCodec, OptionKind, CodecError
from dhcpwire.v4 import (RFC2132OptionType, RFC3046OptionType, MessageType,
	NetBIOSNodeType, Overload, StaticRoute, PolicyFilter, ClientIdentifier,
	RelayAgentSubOption, RelayAgentSubOptionType, Option, register_codec,
	unregister_codec, get_codec, encode_option, decode_option, register_type,
	unregister_type, get_option)
from dhcpwire.v4 import option_codecs


class TestOptionEncoding(unittest.TestCase):
	def test_tlv_framing(self):
		self.assertEqual(encode_option(RFC2132OptionType.MESSAGE_TYPE,
			MessageType.ACK), bytes([53, 1, 5]))
		self.assertEqual(encode_option(RFC2132OptionType.ROUTER,
			[IPv4Address('10.0.0.1'), IPv4Address('10.0.0.2')]),
			bytes([3, 8, 10, 0, 0, 1, 10, 0, 0, 2]))

	def test_pad_and_end_are_one_byte(self):
		self.assertEqual(encode_option(RFC2132OptionType.PAD, None), b'\x00')
		self.assertEqual(encode_option(RFC2132OptionType.END, None), b'\xff')

	def test_empty_payload(self):
		self.assertEqual(
			encode_option(RFC2132OptionType.MOBILE_IP_HOME_AGENT, []),
			bytes([68, 0]))

	def test_long_payload_is_split(self):
		data = b'x'*300
		encoded = encode_option(
			RFC2132OptionType.VENDOR_SPECIFIC_INFORMATION, data)
		self.assertEqual(encoded[:2], bytes([43, 255]))
		self.assertEqual(encoded[257:259], bytes([43, 45]))
		self.assertEqual(len(encoded), 300 + 4)
		self.assertEqual(encoded[2:257] + encoded[259:], data)

	def test_integers_are_big_endian(self):
		self.assertEqual(
			encode_option(RFC2132OptionType.IP_ADDRESS_LEASE_TIME, 7200),
			bytes([51, 4, 0, 0, 0x1c, 0x20]))
		self.assertEqual(encode_option(RFC2132OptionType.TIME_OFFSET, -1),
			bytes([2, 4, 0xff, 0xff, 0xff, 0xff]))


class TestOptionDecoding(unittest.TestCase):
	def assertParseError(self, tag, payload):
		with self.assertRaises(OptionParseError) as cm:
			decode_option(tag, payload)
		self.assertEqual(cm.exception.tag, tag)

	def test_fixed_width_integers(self):
		self.assertEqual(decode_option(51, b'\x00\x00\x1c\x20'), 7200)
		self.assertEqual(decode_option(2, b'\xff\xff\xff\xfe'), -2)
		self.assertEqual(decode_option(13, b'\x01\x00'), 256)
		self.assertParseError(51, b'\x00\x00\x1c')
		self.assertParseError(51, b'\x00\x00\x1c\x20\x00')
		self.assertParseError(13, b'\x01\x00\x00')

	def test_ipv4(self):
		self.assertEqual(decode_option(1, b'\xff\xff\xff\x00'),
			IPv4Address('255.255.255.0'))
		self.assertParseError(1, b'\xff\xff\xff')
		self.assertParseError(54, b'\x0a\x00\x00\x01\x00')

	def test_ipv4_list(self):
		self.assertEqual(decode_option(6, bytes([8, 8, 8, 8, 1, 1, 1, 1])),
			[IPv4Address('8.8.8.8'), IPv4Address('1.1.1.1')])
		self.assertParseError(6, bytes(6))
		self.assertParseError(3, b'')

	def test_ipv4_pairs(self):
		payload = bytes([10, 1, 0, 0, 10, 0, 0, 1])
		self.assertEqual(decode_option(33, payload),
			[StaticRoute(IPv4Address('10.1.0.0'), IPv4Address('10.0.0.1'))])
		self.assertEqual(decode_option(21, payload),
			[PolicyFilter(IPv4Address('10.1.0.0'), IPv4Address('10.0.0.1'))])
		self.assertParseError(33, bytes(12))
		self.assertParseError(21, bytes(4))

	def test_uint16_list(self):
		self.assertEqual(decode_option(25, struct.pack('!HH', 576, 1500)),
			[576, 1500])
		self.assertParseError(25, bytes([5, 220, 1]))

	def test_text(self):
		self.assertEqual(decode_option(12, b'printer'), 'printer')
		self.assertParseError(12, b'caf\xe9')
		self.assertParseError(15, b'')

	def test_bool(self):
		self.assertIs(decode_option(19, b'\x01'), True)
		self.assertIs(decode_option(19, b'\x00'), False)
		self.assertParseError(19, b'\x02')
		self.assertParseError(19, b'')
		self.assertParseError(19, b'\x01\x00')

	def test_enumerated_bytes(self):
		self.assertIs(decode_option(53, b'\x08'), MessageType.INFORM)
		self.assertIs(decode_option(46, b'\x08'), NetBIOSNodeType.H_NODE)
		self.assertIs(decode_option(52, b'\x03'), Overload.BOTH)
		self.assertParseError(53, b'\x09')
		self.assertParseError(53, b'\x00')
		self.assertParseError(46, b'\x03')
		self.assertParseError(52, b'\x04')

	def test_client_identifier(self):
		self.assertEqual(decode_option(61, b'\x01\xaa\xbb'),
			ClientIdentifier(1, b'\xaa\xbb'))
		self.assertParseError(61, b'\x01')

	def test_unknown_tag_is_raw(self):
		self.assertEqual(decode_option(200, b'\x01\x02'), b'\x01\x02')
		self.assertEqual(decode_option(200, b''), b'')
		self.assertIs(option_codecs.kind(200), OptionKind.BYTES)

	def test_decode_min(self):
		with self.assertRaises(OptionParseError):
			option_codecs.decode_min(60, b'abc', 4)
		self.assertEqual(option_codecs.decode_min(60, b'abcd', 4), b'abcd')


class TestValueConstraints(unittest.TestCase):
	def test_message_size_minimum(self):
		for tag in (RFC2132OptionType.MAXIMUM_DHCP_MESSAGE_SIZE,
			RFC2132OptionType.MAXIMUM_DATAGRAM_REASSEMBLY_SIZE):
			with self.subTest(tag=tag):
				with self.assertRaises(OptionValueError):
					decode_option(tag, struct.pack('!H', 575))
				self.assertEqual(decode_option(tag, struct.pack('!H', 576)),
					576)
				with self.assertRaises(OptionValueError):
					Option(tag, 575)

	def test_ttl_minimum(self):
		with self.assertRaises(OptionValueError):
			decode_option(RFC2132OptionType.DEFAULT_IP_TTL, b'\x00')
		with self.assertRaises(OptionValueError):
			decode_option(RFC2132OptionType.TCP_DEFAULT_TTL, b'\x00')
		self.assertEqual(
			decode_option(RFC2132OptionType.TCP_DEFAULT_TTL, b'\x40'), 64)

	def test_mtu_minimum(self):
		with self.assertRaises(OptionValueError):
			decode_option(RFC2132OptionType.INTERFACE_MTU,
				struct.pack('!H', 67))
		with self.assertRaises(OptionValueError):
			decode_option(RFC2132OptionType.PATH_MTU_PLATEAU_TABLE,
				struct.pack('!HH', 1500, 67))

	def test_vendor_data_without_cookie(self):
		with self.assertRaises(OptionValueError):
			decode_option(RFC2132OptionType.VENDOR_SPECIFIC_INFORMATION,
				b'\x01\x63\x82\x53\x63')
		with self.assertRaises(OptionValueError):
			Option(RFC2132OptionType.VENDOR_SPECIFIC_INFORMATION,
				b'\x63\x82\x53\x63')


class TestRelayAgentInformation(unittest.TestCase):
	TAG = RFC3046OptionType.RELAY_AGENT_INFORMATION

	def test_decode(self):
		payload = bytes([2, 3, 1, 2, 3, 1, 1, 1, 9, 0])
		self.assertEqual(decode_option(self.TAG, payload), [
			RelayAgentSubOption(RelayAgentSubOptionType.REMOTE_ID,
				b'\x01\x02\x03'),
			RelayAgentSubOption(RelayAgentSubOptionType.CIRCUIT_ID, b'\x01'),
			RelayAgentSubOption(9, b''),
		])

	def test_overrun_is_parse_error(self):
		with self.assertRaises(OptionParseError) as cm:
			decode_option(self.TAG, bytes([1, 5, 1, 2]))
		self.assertEqual(cm.exception.tag, self.TAG)
		with self.assertRaises(OptionParseError):
			decode_option(self.TAG, bytes([1, 1, 1, 2]))

	def test_encode_keeps_unknown_codes(self):
		option = Option(self.TAG, [(1, b'eth0'), (9, b'\xaa')])
		self.assertEqual(option.value[1], RelayAgentSubOption(9, b'\xaa'))
		self.assertEqual(option.encode(),
			bytes([82, 9, 1, 4]) + b'eth0' + bytes([9, 1, 0xaa]))


class TestCodecRegistry(unittest.TestCase):
	def test_register_site_codec(self):
		site_codec = Codec(name='site', codecs={
			224: OptionCodec(OptionKind.UINT8, lambda v: bytes([v]),
				lambda b: b[0], coercer=int, min_length=1),
		})
		register_codec(site_codec, 0)
		try:
			self.assertIs(option_codecs.kind(224), OptionKind.UINT8)
			self.assertEqual(decode_option(224, b'\x07'), 7)
		finally:
			unregister_codec(site_codec)
		self.assertIs(option_codecs.kind(224), OptionKind.BYTES)

	def test_strict_lookup(self):
		with self.assertRaises(CodecError):
			get_codec(224, ignore_unknown=False)
		with self.assertRaises(CodecError):
			register_codec(object())

	def test_register_site_type(self):
		@enum.unique
		class SiteOptionType(enum.IntEnum):
			SITE_LOCATION = 224

		register_type(SiteOptionType)
		try:
			self.assertIs(get_option(224), SiteOptionType.SITE_LOCATION)
		finally:
			unregister_type(SiteOptionType)
		self.assertEqual(get_option(224, ignore_unknown=True), 224)
		with self.assertRaises(ValueError):
			get_option(224)
		with self.assertRaises(ValueError):
			get_option(256, ignore_unknown=True)

	def test_conversion_error(self):
		with self.assertRaises(OptionConversionError):
			Option(RFC2132OptionType.IP_ADDRESS_LEASE_TIME, 'forever')


if __name__ == '__main__':
	unittest.main()

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
