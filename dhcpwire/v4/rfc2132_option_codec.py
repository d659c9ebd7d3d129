# SPDX-License-Identifier: MIT

__all__ = ['MessageType', 'NetBIOSNodeType', 'Overload', 'PolicyFilter',
	'StaticRoute', 'ClientIdentifier', 'DHCP_MAGIC_COOKIE',
	'MINIMUM_MESSAGE_SIZE', 'rfc2132_option_codec']

import enum
import operator
from collections import namedtuple
from ipaddress import IPv4Address
from struct import Struct

from ..option_codecs import (OptionCodec, OptionKind, Codec, identity,
	coerce_bytes)
from .option_codecs import register as register_optioncodec
from .rfc2132optiontype import RFC2132OptionType

DHCP_MAGIC_COOKIE = b'\x63\x82\x53\x63'

# NOTE(tori): every DHCP participant must accept a datagram of this size
MINIMUM_MESSAGE_SIZE = 576

MINIMUM_MTU = 68


@enum.unique
class MessageType(enum.IntEnum):
	DISCOVER = 1
	OFFER = 2
	REQUEST = 3
	DECLINE = 4
	ACK = 5
	NAK = 6
	RELEASE = 7
	INFORM = 8


@enum.unique
class NetBIOSNodeType(enum.IntEnum):
	B_NODE = 0x1
	P_NODE = 0x2
	M_NODE = 0x4
	H_NODE = 0x8


@enum.unique
class Overload(enum.IntEnum):
	FILE = 1
	SNAME = 2
	BOTH = 3


PolicyFilter = namedtuple('PolicyFilter', 'address mask')
StaticRoute = namedtuple('StaticRoute', 'destination router')
ClientIdentifier = namedtuple('ClientIdentifier', 'type data')

uint8 = Struct('!B')
uint16 = Struct('!H')
int32 = Struct('!i')
uint32 = Struct('!I')


def make_unpacker(struct):
	def unpacker(b):
		result, = struct.unpack(b)
		return result
	return unpacker


def make_list_unpacker(struct):
	def unpacker(b):
		return [value for value, in struct.iter_unpack(b)]
	return unpacker


def make_list_packer(struct):
	def packer(values):
		return b''.join(struct.pack(value) for value in values)
	return packer


def make_enum_codec(Enum):
	unpack = make_unpacker(uint8)

	def coercer(value):
		if isinstance(value, bool):
			raise TypeError('expected %s, got bool' % Enum.__name__)
		return Enum(value)

	return OptionCodec(OptionKind.ENUM, uint8.pack,
		lambda b: Enum(unpack(b)), coercer=coercer, min_length=1)


def at_least(n):
	return lambda value: value >= n


def coerce_int(value):
	if isinstance(value, bool):
		raise TypeError('expected an integer, got bool')
	return operator.index(value)


def coerce_int_list(values):
	if isinstance(values, (str, bytes)):
		raise TypeError('expected a list of integers, got %s'
			% type(values).__name__)
	return [coerce_int(value) for value in values]


def coerce_bool(value):
	if value not in (0, 1):
		raise ValueError('expected a boolean, got %r' % (value,))
	return bool(value)


def decode_bool(encoded):
	value, = uint8.unpack(encoded)
	if value not in (0, 1):
		raise ValueError('boolean byte must be 0 or 1, got %d' % value)
	return bool(value)


def coerce_text(value):
	if isinstance(value, (bytes, bytearray, memoryview)):
		return bytes(value).decode('ascii')
	if not isinstance(value, str):
		raise TypeError('expected text, got %s' % type(value).__name__)
	value.encode('ascii')
	return value


def encode_text(decoded):
	return decoded.encode('ascii')


def decode_text(encoded):
	return encoded.decode('ascii')


def coerce_ip(value):
	if isinstance(value, (bytes, bytearray)):
		value = bytes(value)
	return IPv4Address(value)


def encode_ip(decoded):
	return decoded.packed


def decode_ip(encoded):
	if len(encoded) != 4:
		raise ValueError('an IPv4 address is 4 bytes, got %d' % len(encoded))
	return IPv4Address(encoded)


def coerce_ips(values):
	if isinstance(values, (str, bytes, IPv4Address)):
		raise TypeError('expected a list of addresses, got %s'
			% type(values).__name__)
	return [coerce_ip(value) for value in values]


def encode_ips(decoded):
	return b''.join(value.packed for value in decoded)


def decode_ips(encoded):
	if len(encoded)%4 != 0:
		raise ValueError('IPv4 list length %d is not a multiple of 4'
			% len(encoded))
	return [IPv4Address(encoded[i:i + 4]) for i in range(0, len(encoded), 4)]


def make_ip_pair_codec(Pair):
	def coerce_pairs(values):
		if isinstance(values, (str, bytes)):
			raise TypeError('expected a list of address pairs, got %s'
				% type(values).__name__)
		return [Pair(*map(coerce_ip, pair)) for pair in values]

	def encode_pairs(decoded):
		return b''.join(first.packed + second.packed
			for first, second in decoded)

	def decode_pairs(encoded):
		if len(encoded)%8 != 0:
			raise ValueError('IPv4 pair list length %d is not a multiple'
				' of 8' % len(encoded))
		return [
			Pair(IPv4Address(encoded[i:i + 4]),
				IPv4Address(encoded[i + 4:i + 8]))
			for i in range(0, len(encoded), 8)
		]

	return OptionCodec(OptionKind.IPV4_PAIRS, encode_pairs, decode_pairs,
		coercer=coerce_pairs, min_length=8)


def coerce_client_identifier(value):
	if isinstance(value, (bytes, bytearray, memoryview)):
		value = bytes(value)
		if not value:
			raise ValueError('client identifier is empty')
		return ClientIdentifier(value[0], value[1:])
	type_, data = value
	return ClientIdentifier(coerce_int(type_), coerce_bytes(data))


def encode_client_identifier(decoded):
	return bytes([decoded.type]) + decoded.data


def decode_client_identifier(encoded):
	return ClientIdentifier(encoded[0], bytes(encoded[1:]))


empty_codec = OptionCodec(OptionKind.EMPTY, lambda _: b'', lambda _: None)
bool_codec = OptionCodec(OptionKind.BOOL, uint8.pack, decode_bool,
	coercer=coerce_bool, min_length=1)
ip_codec = OptionCodec(OptionKind.IPV4, encode_ip, decode_ip,
	coercer=coerce_ip, min_length=4)
ip_list_codec = OptionCodec(OptionKind.IPV4_LIST, encode_ips, decode_ips,
	coercer=coerce_ips, min_length=4)
text_codec = OptionCodec(OptionKind.TEXT, encode_text, decode_text,
	coercer=coerce_text, min_length=1)
bytes_codec = OptionCodec(OptionKind.BYTES, identity, bytes,
	coercer=coerce_bytes, min_length=1)
uint8_codec = OptionCodec(OptionKind.UINT8, uint8.pack, make_unpacker(uint8),
	coercer=coerce_int, min_length=1)
uint16_codec = OptionCodec(OptionKind.UINT16, uint16.pack,
	make_unpacker(uint16), coercer=coerce_int, min_length=2)
uint32_codec = OptionCodec(OptionKind.UINT32, uint32.pack,
	make_unpacker(uint32), coercer=coerce_int, min_length=4)
int32_codec = OptionCodec(OptionKind.INT32, int32.pack, make_unpacker(int32),
	coercer=coerce_int, min_length=4)


def guarded(codec, check, message):
	"""Copy of `codec` that also enforces `check` on every value"""
	return OptionCodec(codec.kind, codec.encoder, codec.decoder,
		coercer=codec.coercer, min_length=codec.min_length, check=check,
		message=message)


# NOTE(tori): the 576-byte minimums are guarded on decode as well as on
# construction; a peer that advertises less is broken, not merely quirky
message_size_codec = guarded(uint16_codec, at_least(MINIMUM_MESSAGE_SIZE),
	'value must be at least %d' % MINIMUM_MESSAGE_SIZE)
ttl_codec = guarded(uint8_codec, at_least(1), 'TTL must be at least 1')

rfc2132_option_codec = Codec(
	name='rfc2132',
	codecs={
		RFC2132OptionType.PAD: empty_codec,
		RFC2132OptionType.END: empty_codec,
		RFC2132OptionType.SUBNET_MASK: ip_codec,
		RFC2132OptionType.TIME_OFFSET: int32_codec,
		RFC2132OptionType.ROUTER: ip_list_codec,
		RFC2132OptionType.TIME_SERVER: ip_list_codec,
		RFC2132OptionType.NAME_SERVER: ip_list_codec,
		RFC2132OptionType.DOMAIN_NAME_SERVER: ip_list_codec,
		RFC2132OptionType.LOG_SERVER: ip_list_codec,
		RFC2132OptionType.COOKIE_SERVER: ip_list_codec,
		RFC2132OptionType.LPR_SERVER: ip_list_codec,
		RFC2132OptionType.IMPRESS_SERVER: ip_list_codec,
		RFC2132OptionType.RESOURCE_LOCATION_SERVER: ip_list_codec,
		RFC2132OptionType.HOST_NAME: text_codec,
		RFC2132OptionType.BOOT_FILE_SIZE: uint16_codec,
		RFC2132OptionType.MERIT_DUMP_FILE: text_codec,
		RFC2132OptionType.DOMAIN_NAME: text_codec,
		RFC2132OptionType.SWAP_SERVER: ip_codec,
		RFC2132OptionType.ROOT_PATH: text_codec,
		RFC2132OptionType.EXTENSIONS_PATH: text_codec,
		RFC2132OptionType.IP_FORWARDING_ENABLE: bool_codec,
		RFC2132OptionType.NONLOCAL_SOURCE_ROUTING_ENABLE: bool_codec,
		RFC2132OptionType.POLICY_FILTER: make_ip_pair_codec(PolicyFilter),
		RFC2132OptionType.MAXIMUM_DATAGRAM_REASSEMBLY_SIZE: (
			message_size_codec
		),
		RFC2132OptionType.DEFAULT_IP_TTL: ttl_codec,
		RFC2132OptionType.PATH_MTU_AGING_TIMEOUT: uint32_codec,
		RFC2132OptionType.PATH_MTU_PLATEAU_TABLE: OptionCodec(
			OptionKind.UINT16_LIST,
			make_list_packer(uint16),
			make_list_unpacker(uint16),
			coercer=coerce_int_list,
			min_length=2,
			check=lambda lst: all(elt >= MINIMUM_MTU for elt in lst),
			message='MTU must be at least %d' % MINIMUM_MTU
		),
		RFC2132OptionType.INTERFACE_MTU: guarded(uint16_codec,
			at_least(MINIMUM_MTU), 'MTU must be at least %d' % MINIMUM_MTU),
		RFC2132OptionType.ALL_SUBNETS_ARE_LOCAL: bool_codec,
		RFC2132OptionType.BROADCAST_ADDRESS: ip_codec,
		RFC2132OptionType.PERFORM_MASK_DISCOVERY: bool_codec,
		RFC2132OptionType.MASK_SUPPLIER: bool_codec,
		RFC2132OptionType.PERFORM_ROUTER_DISCOVERY: bool_codec,
		RFC2132OptionType.ROUTER_SOLICITATION_ADDRESS: ip_codec,
		RFC2132OptionType.STATIC_ROUTE: make_ip_pair_codec(StaticRoute),
		RFC2132OptionType.TRAILER_ENCAPSULATION: bool_codec,
		RFC2132OptionType.ARP_CACHE_TIMEOUT: uint32_codec,
		RFC2132OptionType.ETHERNET_ENCAPSULATION: bool_codec,
		RFC2132OptionType.TCP_DEFAULT_TTL: ttl_codec,
		RFC2132OptionType.TCP_KEEPALIVE_INTERVAL: uint32_codec,
		RFC2132OptionType.TCP_KEEPALIVE_GARBAGE: bool_codec,
		RFC2132OptionType.NETWORK_INFORMATION_SERVICE_DOMAIN: text_codec,
		RFC2132OptionType.NETWORK_INFORMATION_SERVERS: ip_list_codec,
		RFC2132OptionType.NETWORK_TIME_PROTOCOL_SERVERS: ip_list_codec,
		RFC2132OptionType.VENDOR_SPECIFIC_INFORMATION: guarded(bytes_codec,
			lambda v: DHCP_MAGIC_COOKIE not in v,
			'dhcp magic cookie must not exist in vendor specific data'),
		RFC2132OptionType.NETBIOS_OVER_TCPIP_NAME_SERVER: ip_list_codec,
		RFC2132OptionType.NETBIOS_OVER_TCPIP_DATAGRAM_DISTRIBUTION_SERVER: (
			ip_list_codec
		),
		RFC2132OptionType.NETBIOS_OVER_TCPIP_NODE_TYPE: (
			make_enum_codec(NetBIOSNodeType)
		),
		RFC2132OptionType.NETBIOS_OVER_TCPIP_SCOPE: text_codec,
		RFC2132OptionType.X_WINDOW_SYSTEM_FONT_SERVER: ip_list_codec,
		RFC2132OptionType.X_WINDOW_SYSTEM_DISPLAY_MANAGER: ip_list_codec,
		RFC2132OptionType.REQUESTED_IP_ADDRESS: ip_codec,
		RFC2132OptionType.IP_ADDRESS_LEASE_TIME: uint32_codec,
		RFC2132OptionType.OPTION_OVERLOAD: make_enum_codec(Overload),
		RFC2132OptionType.MESSAGE_TYPE: make_enum_codec(MessageType),
		RFC2132OptionType.SERVER_IDENTIFIER: ip_codec,
		# NOTE(tori): a list of tags is kept as the raw tag bytes; any
		# iterable of ints is accepted on construction
		RFC2132OptionType.PARAMETER_REQUEST_LIST: bytes_codec,
		RFC2132OptionType.MESSAGE: text_codec,
		RFC2132OptionType.MAXIMUM_DHCP_MESSAGE_SIZE: message_size_codec,
		RFC2132OptionType.RENEWAL_TIME_VALUE: uint32_codec,
		RFC2132OptionType.REBINDING_TIME_VALUE: uint32_codec,
		RFC2132OptionType.VENDOR_CLASS_IDENTIFIER: bytes_codec,
		RFC2132OptionType.CLIENT_IDENTIFIER: OptionCodec(
			OptionKind.CLIENT_IDENTIFIER,
			encode_client_identifier,
			decode_client_identifier,
			coercer=coerce_client_identifier,
			min_length=2
		),
		RFC2132OptionType.NETWORK_INFORMATION_SERVICE_PLUS_DOMAIN: (
			text_codec
		),
		RFC2132OptionType.NETWORK_INFORMATION_SERVICE_PLUS_SERVERS: (
			ip_list_codec
		),
		RFC2132OptionType.TFTP_SERVER_NAME: text_codec,
		RFC2132OptionType.BOOTFILE_NAME: text_codec,
		# NOTE(tori): zero home agents is a legal answer
		RFC2132OptionType.MOBILE_IP_HOME_AGENT: OptionCodec(
			OptionKind.IPV4_LIST, encode_ips, decode_ips, coercer=coerce_ips
		),
		RFC2132OptionType.SIMPLE_MAIL_TRANSPORT_PROTOCOL_SERVER: (
			ip_list_codec
		),
		RFC2132OptionType.POST_OFFICE_PROTOCOL_SERVER: ip_list_codec,
		RFC2132OptionType.NETWORK_NEWS_TRANSPORT_PROTOCOL_SERVER: (
			ip_list_codec
		),
		RFC2132OptionType.DEFAULT_WORLD_WIDE_WEB_SERVER: ip_list_codec,
		RFC2132OptionType.DEFAULT_FINGER_SERVER: ip_list_codec,
		RFC2132OptionType.DEFAULT_INTERNET_RELAY_CHAT_SERVER: ip_list_codec,
		RFC2132OptionType.STREETTALK_SERVER: ip_list_codec,
		RFC2132OptionType.STREETTALK_DIRECTORY_ASSISTANCE_SERVER: (
			ip_list_codec
		),
	}
)

register_optioncodec(rfc2132_option_codec)

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
