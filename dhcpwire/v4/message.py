# SPDX-License-Identifier: MIT

__all__ = ['Operation', 'HardwareType', 'Flags', 'MessageType', 'Packet',
	'DHCP_MAGIC_COOKIE', 'HEADER_SIZE', 'BOOTP_MINIMUM_SIZE',
	'MINIMUM_MESSAGE_SIZE']

import copy
import enum
import logging
import operator
import random
import struct
from collections import namedtuple
from ipaddress import IPv4Address

from ..hardwaretype import HardwareType
# NOTE(tori): the rfc2132 import also registers the option type, so don't
# remove it
from .rfc2132 import (RFC2132OptionType, MessageType, DHCP_MAGIC_COOKIE,
	MINIMUM_MESSAGE_SIZE)
from .options import OptionSet
from ..error import (InvalidPacketLengthError, MessageOperationError,
	HardwareTypeError, HardwareAddressError, HopsError, TransactionIdError,
	SecondsError, FlagsError, ClientAddressError, YourAddressError,
	ServerAddressError, GatewayAddressError, ServerNameError,
	BootFileNameError, CookieError)

logger = logging.getLogger(__name__)

HEADER_SIZE = 240

# NOTE(tori): some BOOTP relays drop anything shorter than a full BOOTP
# packet, so replies to them get padded up to this
BOOTP_MINIMUM_SIZE = 300

HARDWARE_ADDRESS_LENGTHS = (6, 8)

SERVER_ADDRESS_OFFSET = 20


@enum.unique
class Operation(enum.IntEnum):
	BOOTREQUEST = 1
	BOOTREPLY = 2


# NOTE(tori): the broadcast bit is carried as the last bit of the field
# (00 01), not the rfc2131 high bit (80 00); every other pattern is rejected
@enum.unique
class Flags(enum.IntEnum):
	UNICAST = 0
	BROADCAST = 1


FLAG_BYTES = {
	Flags.UNICAST: b'\x00\x00',
	Flags.BROADCAST: b'\x00\x01',
}


def parse_hardware_address(value):
	if isinstance(value, str):
		return bytes.fromhex(value.replace(':', '').replace('-', ''))
	return bytes(value)


def check_uint(value, bound, Error):
	if isinstance(value, bool):
		raise Error('`%r` is not an integer' % (value,), value)
	try:
		value = operator.index(value)
	except TypeError:
		raise Error('`%r` is not an integer' % (value,), value) from None
	if value not in range(bound):
		raise Error('`%r` not in range(%#x)' % (value, bound), value)
	return value


def decode_text_field(raw):
	# NOTE(tori): NULs and anything outside 7-bit ascii are dropped
	return bytes(b for b in raw if 0 < b < 0x80).decode('ascii')


def option_property(tag, doc=None):
	def getter(self):
		return self.options.get(tag)

	def setter(self, value):
		if value is None:
			self.options.remove(tag)
		else:
			self.options[tag] = value

	return property(getter, setter, doc=doc)


class Packet:
	"""A DHCPv4 datagram: the fixed 240-byte header plus its options.

	Every field is validated as it is set, whether by the constructor, by
	`decode()` or by assigning to a property, and each field raises its own
	`HeaderFieldError` subclass. Options live in `options`, an `OptionSet`.
	"""

	NAMES = namedtuple('Fields', 'op htype hlen hops xid secs flags ciaddr'
		' yiaddr siaddr giaddr chaddr sname file cookie', defaults=(None,)*15)
	CODEC = struct.Struct(
		'!'			# network byte order (big)
		'BBBB'		# op, htype, hlen, hops
		'I'			# xid
		'H'			# secs
		'2s'		# flags
		'4s'		# ciaddr (client ip)
		'4s'		# yiaddr (given ip by server)
		'4s'		# siaddr (server ip address)
		'4s'		# giaddr (gateway ip address)
		'16s'		# chaddr (client hardware address)
		'64s'		# server host name (null-terminated)
		'128s'		# boot file name (null-terminated)
		'4s'		# magic cookie
	)

	@property
	def operation(self):
		return Operation(self.raw_data['op'])

	@operation.setter
	def operation(self, value):
		try:
			self.raw_data['op'] = Operation(value)
		except ValueError:
			raise MessageOperationError('unknown operation %r' % (value,),
				value) from None

	@property
	def hardware_type(self):
		return HardwareType(self.raw_data['htype'])

	@hardware_type.setter
	def hardware_type(self, value):
		try:
			self.raw_data['htype'] = HardwareType(value)
		except ValueError:
			raise HardwareTypeError('unsupported hardware type %r' % (value,),
				value) from None

	@property
	def hardware_address(self):
		return self.raw_data['chaddr'][:self.raw_data['hlen']]

	@hardware_address.setter
	def hardware_address(self, value):
		try:
			data = parse_hardware_address(value)
		except (TypeError, ValueError):
			raise HardwareAddressError('not a hardware address: %r'
				% (value,), value) from None
		if len(data) not in HARDWARE_ADDRESS_LENGTHS:
			raise HardwareAddressError('hardware address must be 6 or 8 bytes,'
				' got %d' % len(data), value)
		self.raw_data['chaddr'] = (
			data + b'\0'*16
		)[:16]
		self.raw_data['hlen'] = len(data)

	@property
	def hops(self):
		return self.raw_data['hops']

	@hops.setter
	def hops(self, value):
		self.raw_data['hops'] = check_uint(value, 0x100, HopsError)

	@property
	def transaction_id(self):
		return self.raw_data['xid']

	@transaction_id.setter
	def transaction_id(self, value):
		self.raw_data['xid'] = check_uint(value, 0x100000000,
			TransactionIdError)

	@property
	def seconds(self):
		return self.raw_data['secs']

	@seconds.setter
	def seconds(self, value):
		self.raw_data['secs'] = check_uint(value, 0x10000, SecondsError)

	@property
	def flags(self):
		for flags, raw in FLAG_BYTES.items():
			if raw == self.raw_data['flags']:
				return flags

	@flags.setter
	def flags(self, value):
		try:
			self.raw_data['flags'] = FLAG_BYTES[Flags(value)]
		except ValueError:
			raise FlagsError('unknown flags %r' % (value,), value) from None

	def _set_ip(self, field, value, error):
		try:
			self.raw_data[field] = IPv4Address(value).packed
		except ValueError:
			raise error('invalid IPv4 address %r' % (value,), value) from None

	@property
	def client_ip(self):
		return IPv4Address(self.raw_data['ciaddr'])

	@client_ip.setter
	def client_ip(self, value):
		self._set_ip('ciaddr', value, ClientAddressError)

	@property
	def your_ip(self):
		return IPv4Address(self.raw_data['yiaddr'])

	@your_ip.setter
	def your_ip(self, value):
		self._set_ip('yiaddr', value, YourAddressError)

	@property
	def server_ip(self):
		return IPv4Address(self.raw_data['siaddr'])

	@server_ip.setter
	def server_ip(self, value):
		self._set_ip('siaddr', value, ServerAddressError)

	@property
	def gateway_ip(self):
		return IPv4Address(self.raw_data['giaddr'])

	@gateway_ip.setter
	def gateway_ip(self, value):
		self._set_ip('giaddr', value, GatewayAddressError)

	def _set_text(self, field, size, value, error):
		try:
			if isinstance(value, (bytes, bytearray)):
				value = bytes(value).decode('ascii')
			data = value.encode('ascii')
		except (AttributeError, ValueError):
			raise error('not ascii text: %r' % (value,), value) from None
		if len(data) > size:
			raise error('encoded text too long: `%r`' % (value,), value)
		self.raw_data[field] = (
			data + b'\0'*size
		)[:size]

	@property
	def server_name(self):
		return self.raw_data['sname'].rstrip(b'\0').decode('ascii')

	@server_name.setter
	def server_name(self, value):
		self._set_text('sname', 64, value, ServerNameError)

	@property
	def boot_file_name(self):
		return self.raw_data['file'].rstrip(b'\0').decode('ascii')

	@boot_file_name.setter
	def boot_file_name(self, value):
		self._set_text('file', 128, value, BootFileNameError)

	@property
	def magic_cookie(self):
		return self.raw_data['cookie']

	@property
	def options(self):
		return self._options

	@options.setter
	def options(self, value):
		self._options = OptionSet(value)

	message_type = option_property(RFC2132OptionType.MESSAGE_TYPE)
	requested_ip = option_property(RFC2132OptionType.REQUESTED_IP_ADDRESS)
	lease_time = option_property(RFC2132OptionType.IP_ADDRESS_LEASE_TIME)
	server_identifier = option_property(RFC2132OptionType.SERVER_IDENTIFIER)
	parameter_request_list = option_property(
		RFC2132OptionType.PARAMETER_REQUEST_LIST)
	client_identifier = option_property(RFC2132OptionType.CLIENT_IDENTIFIER)
	message = option_property(RFC2132OptionType.MESSAGE)

	def __init__(self, *, op, htype=HardwareType.ETHERNET, hops=0, xid=None,
		rng=random, secs=0, flags=Flags.UNICAST, ciaddr=0, yiaddr=0,
		siaddr=0, giaddr=0, hwaddr=b'\x00\x00\x00\x00\x00\x00', sname='',
		file='', options=None):
		self.raw_data = self.NAMES()._asdict()
		self.operation = op
		self.hardware_type = htype
		self.hops = hops
		if xid is None:
			xid = rng.randrange(0x100000000)
		self.transaction_id = xid
		self.seconds = secs
		self.flags = flags
		self.client_ip = ciaddr
		self.your_ip = yiaddr
		self.server_ip = siaddr
		self.gateway_ip = giaddr
		self.hardware_address = hwaddr
		self.server_name = sname
		self.boot_file_name = file
		self.raw_data['cookie'] = DHCP_MAGIC_COOKIE
		self.options = options

	def _repr_parts(self):
		return (
			'operation={op}'.format(op=self.operation),
			'hardware_type={htype}'.format(htype=self.hardware_type),
			'hardware_address={hwaddr}'.format(
				hwaddr=self.hardware_address.hex(':')),
			'hops={hops}'.format(hops=self.hops),
			'transaction_id={xid}'.format(xid=hex(self.transaction_id)),
			'seconds={secs}'.format(secs=self.seconds),
			'flags={flags}'.format(flags=self.flags),
			'client_ip={ciaddr}'.format(ciaddr=self.client_ip),
			'your_ip={yiaddr}'.format(yiaddr=self.your_ip),
			'server_ip={siaddr}'.format(siaddr=self.server_ip),
			'gateway_ip={giaddr}'.format(giaddr=self.gateway_ip),
			'server_name={sname!r}'.format(sname=self.server_name),
			'boot_file_name={file!r}'.format(file=self.boot_file_name),
			'options={options!r}'.format(options=self.options)
		)

	def __repr__(self):
		return '{cls}({parts})'.format(
			cls=type(self).__name__,
			parts=', '.join(self._repr_parts())
		)

	def __eq__(self, other):
		if not isinstance(other, Packet):
			return NotImplemented
		return (self.raw_data == other.raw_data
			and self.options == other.options)

	__hash__ = None

	def copy(self):
		return copy.deepcopy(self)

	def encode(self, pad_length=None):
		ordered_data = [self.raw_data[field] for field in self.NAMES._fields]
		encoded = self.CODEC.pack(*ordered_data) + self.options.to_bytes()
		if pad_length is not None:
			encoded += b'\0'*max(0, pad_length - len(encoded))
		return encoded

	def encode_for_servers(self, addresses, pad_length=None):
		"""Encode once per candidate server address.

		The copies only differ in the server address field, which is patched
		into the encoded datagram rather than re-encoding the whole packet.
		"""
		encoded = self.encode(pad_length)
		start, end = SERVER_ADDRESS_OFFSET, SERVER_ADDRESS_OFFSET + 4
		result = {}
		for address in addresses:
			try:
				address = IPv4Address(address)
			except ValueError:
				raise ServerAddressError('invalid IPv4 address %r'
					% (address,), address) from None
			result[address] = encoded[:start] + address.packed + encoded[end:]
		return result

	@classmethod
	def decode(cls, packet):
		packet = bytes(packet)
		if len(packet) < HEADER_SIZE:
			raise InvalidPacketLengthError(len(packet), HEADER_SIZE)
		fields = cls.NAMES._make(cls.CODEC.unpack_from(packet))

		# NOTE(tori): fields are checked in wire order, first failure wins
		self = cls.__new__(cls)
		self.raw_data = cls.NAMES()._asdict()
		self.operation = fields.op
		self.hardware_type = fields.htype
		if fields.hlen not in HARDWARE_ADDRESS_LENGTHS:
			raise HardwareAddressError('hardware address must be 6 or 8 bytes,'
				' got %d' % fields.hlen, fields.hlen)
		self.hops = fields.hops
		self.transaction_id = fields.xid
		self.seconds = fields.secs
		if fields.flags not in FLAG_BYTES.values():
			raise FlagsError('unknown flags %r' % fields.flags, fields.flags)
		self.raw_data['flags'] = fields.flags
		self.client_ip = fields.ciaddr
		self.your_ip = fields.yiaddr
		self.server_ip = fields.siaddr
		self.gateway_ip = fields.giaddr
		self.hardware_address = fields.chaddr[:fields.hlen]
		self.server_name = decode_text_field(fields.sname)
		self.boot_file_name = decode_text_field(fields.file)
		if fields.cookie != DHCP_MAGIC_COOKIE:
			raise CookieError('bad magic cookie: %r' % fields.cookie,
				fields.cookie)
		self.raw_data['cookie'] = fields.cookie
		self.options = OptionSet.from_bytes(packet[HEADER_SIZE:])

		logger.debug('decoded %s from %s, xid %#010x, %d options',
			getattr(self.message_type, 'name', None),
			self.hardware_address.hex(':'), self.transaction_id,
			len(self.options))
		return self

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
