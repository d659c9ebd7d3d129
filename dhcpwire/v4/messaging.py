# SPDX-License-Identifier: MIT

__all__ = ['Message', 'Discover', 'Offer', 'Request', 'Inform', 'Release',
	'Decline', 'Ack', 'Nak', 'TRANSITIONS', 'can_transition']

import logging
import random

from .message import Packet, Operation, Flags, MessageType
from .options import Option, OptionSet
from .rfc2132 import RFC2132OptionType
from ..hardwaretype import HardwareType
from ..error import MessageTypeError, TransitionError

logger = logging.getLogger(__name__)

MESSAGE_TYPE = RFC2132OptionType.MESSAGE_TYPE
REQUESTED_IP_ADDRESS = RFC2132OptionType.REQUESTED_IP_ADDRESS
IP_ADDRESS_LEASE_TIME = RFC2132OptionType.IP_ADDRESS_LEASE_TIME
SERVER_IDENTIFIER = RFC2132OptionType.SERVER_IDENTIFIER
PARAMETER_REQUEST_LIST = RFC2132OptionType.PARAMETER_REQUEST_LIST
MESSAGE = RFC2132OptionType.MESSAGE
MAXIMUM_DHCP_MESSAGE_SIZE = RFC2132OptionType.MAXIMUM_DHCP_MESSAGE_SIZE
VENDOR_CLASS_IDENTIFIER = RFC2132OptionType.VENDOR_CLASS_IDENTIFIER
CLIENT_IDENTIFIER = RFC2132OptionType.CLIENT_IDENTIFIER

# NOTE(tori): options that only make sense coming from a client; servers
# drop them before answering
CLIENT_NEGOTIATION_OPTIONS = (REQUESTED_IP_ADDRESS, PARAMETER_REQUEST_LIST,
	CLIENT_IDENTIFIER, MAXIMUM_DHCP_MESSAGE_SIZE)

TRANSITIONS = {
	MessageType.DISCOVER: frozenset({MessageType.OFFER}),
	MessageType.OFFER: frozenset({MessageType.REQUEST}),
	MessageType.REQUEST: frozenset({MessageType.ACK, MessageType.NAK}),
	MessageType.INFORM: frozenset({MessageType.ACK}),
	MessageType.DECLINE: frozenset(),
	MessageType.RELEASE: frozenset(),
	MessageType.ACK: frozenset(),
	MessageType.NAK: frozenset(),
}


def as_message_type(value):
	if isinstance(value, Message) or (
		isinstance(value, type) and issubclass(value, Message)):
		value = value.ROLE
	return MessageType(value)


def can_transition(source, target):
	"""Whether `target` may follow `source`

	Either side can be a `MessageType`, its value, or a message class or
	instance.
	"""
	return as_message_type(target) in TRANSITIONS[as_message_type(source)]


def optional(tag, value):
	if value is None:
		return None
	return Option(tag, value)


def negotiation_options(*, requested_ip=None, lease_time=None,
	client_identifier=None, vendor_class_identifier=None,
	server_identifier=None, parameter_request_list=None,
	max_message_size=None, message=None):
	return [
		optional(REQUESTED_IP_ADDRESS, requested_ip),
		optional(IP_ADDRESS_LEASE_TIME, lease_time),
		optional(CLIENT_IDENTIFIER, client_identifier),
		optional(VENDOR_CLASS_IDENTIFIER, vendor_class_identifier),
		optional(SERVER_IDENTIFIER, server_identifier),
		optional(PARAMETER_REQUEST_LIST, parameter_request_list),
		optional(MAXIMUM_DHCP_MESSAGE_SIZE, max_message_size),
		optional(MESSAGE, message),
	]


def build_options(role, extra=None, **negotiation):
	options = OptionSet(extra)
	options.upsert(Option(MESSAGE_TYPE, role))
	for option in negotiation_options(**negotiation):
		options.upsert_optional(option)
	return options


class Message:
	"""A packet in a known role of the DHCP exchange.

	Subclasses pin `ROLE` to one message type and carry only the transitions
	that are legal from that role. The packet is mutated in place by a
	transition, so the wrapper it came from is stale afterwards.
	"""

	ROLE = None
	ROLES = {}

	def __init_subclass__(cls, **kwargs):
		super().__init_subclass__(**kwargs)
		if cls.ROLE is not None:
			Message.ROLES[cls.ROLE] = cls

	def __init__(self, packet):
		if not isinstance(packet, Packet):
			raise TypeError('not supported: %r' % (packet,))
		if self.ROLE is None:
			raise TypeError('use Message.classify() to wrap a packet')
		message_type = self.message_type_of(packet)
		if message_type != self.ROLE:
			raise MessageTypeError('%s cannot wrap a %s packet'
				% (type(self).__name__,
				getattr(message_type, 'name', message_type)))
		self.packet = packet

	@staticmethod
	def message_type_of(packet):
		message_type = packet.options.get(MESSAGE_TYPE)
		if message_type is None:
			raise MessageTypeError('packet has no message type option')
		return message_type

	@classmethod
	def classify(cls, packet):
		message_type = cls.message_type_of(packet)
		try:
			Role = Message.ROLES[message_type]
		except KeyError:
			raise MessageTypeError('no message role for %r'
				% (message_type,)) from None
		return Role(packet)

	@classmethod
	def decode(cls, data):
		return cls.classify(Packet.decode(data))

	def encode(self, pad_length=None):
		return self.packet.encode(pad_length)

	@property
	def options(self):
		return self.packet.options

	def __repr__(self):
		return '%s(%r)' % (type(self).__name__, self.packet)

	def _check_transition(self, target):
		current = self.packet.options.get(MESSAGE_TYPE)
		if current != self.ROLE:
			raise TransitionError('stale %s: its packet is now %s'
				% (type(self).__name__, getattr(current, 'name', current)))
		if not can_transition(self.ROLE, target):
			raise TransitionError('%s cannot become %s'
				% (self.ROLE.name, target.name))

	def _advance(self, target, packet):
		packet.options.upsert(Option(MESSAGE_TYPE, target))
		# NOTE(tori): `packet` is a working copy; nothing reaches the wrapped
		# packet until every field and option has been accepted
		self.packet.raw_data = packet.raw_data
		self.packet.options = packet.options
		logger.debug('xid %#010x: %s -> %s', self.packet.transaction_id,
			self.ROLE.name, target.name)
		return Message.ROLES[target](self.packet)

	def _reply(self):
		packet = self.packet.copy()
		packet.operation = Operation.BOOTREPLY
		packet.hardware_type = HardwareType.ETHERNET
		packet.hops = 0
		packet.seconds = 0
		return packet


def new_request_packet(role, hwaddr, *, xid=None, rng=random,
	flags=Flags.UNICAST, ciaddr=0, options=None, **negotiation):
	return Packet(
		op=Operation.BOOTREQUEST,
		xid=xid,
		rng=rng,
		flags=flags,
		ciaddr=ciaddr,
		hwaddr=hwaddr,
		options=build_options(role, options, **negotiation),
	)


class Discover(Message):
	ROLE = MessageType.DISCOVER

	@classmethod
	def create(cls, hwaddr, *, xid=None, rng=random, requested_ip=None,
		lease_time=None, client_identifier=None, vendor_class_identifier=None,
		parameter_request_list=None, max_message_size=None, options=None):
		packet = new_request_packet(cls.ROLE, hwaddr, xid=xid, rng=rng,
			flags=Flags.BROADCAST, options=options, requested_ip=requested_ip,
			lease_time=lease_time, client_identifier=client_identifier,
			vendor_class_identifier=vendor_class_identifier,
			parameter_request_list=parameter_request_list,
			max_message_size=max_message_size)
		# NOTE(tori): a discover is addressed to every server, never one
		packet.options.remove(SERVER_IDENTIFIER)
		return cls(packet)

	def to_offer(self, lease_time, client_ip, server_ip, *, file=None,
		message=None, options=None):
		"""Answer this discover with an offer of `client_ip`"""
		self._check_transition(MessageType.OFFER)
		packet = self._reply()
		packet.client_ip = 0
		packet.your_ip = client_ip
		packet.server_ip = server_ip
		packet.boot_file_name = file or ''

		packet.options.merge(OptionSet(options))
		packet.options.upsert_optional(optional(MESSAGE, message))
		for tag in CLIENT_NEGOTIATION_OPTIONS:
			packet.options.remove(tag)
		packet.options.upsert(Option(SERVER_IDENTIFIER, server_ip))
		packet.options.upsert(Option(IP_ADDRESS_LEASE_TIME, lease_time))
		return self._advance(MessageType.OFFER, packet)


class Offer(Message):
	ROLE = MessageType.OFFER

	def to_request(self, hwaddr, seconds=0, *, client_ip=None,
		broadcast=False, requested_ip=None, lease_time=None,
		client_identifier=None, vendor_class_identifier=None,
		server_identifier=None, parameter_request_list=None,
		max_message_size=None, options=None):
		"""Turn this offer into the client's request for it.

		The option set is rebuilt from scratch. Only the message type, the
		negotiation options given here and `options` are carried, and the
		server identifier defaults to the one the offer came with.
		"""
		self._check_transition(MessageType.REQUEST)
		if server_identifier is None:
			server_identifier = self.packet.server_identifier
		packet = self.packet.copy()
		packet.operation = Operation.BOOTREQUEST
		packet.hardware_type = HardwareType.ETHERNET
		packet.hops = 0
		packet.seconds = seconds
		packet.flags = Flags.BROADCAST if broadcast else Flags.UNICAST
		packet.hardware_address = hwaddr
		packet.client_ip = 0 if client_ip is None else client_ip
		packet.your_ip = 0
		packet.server_ip = 0
		packet.gateway_ip = 0
		packet.options = build_options(self.ROLE, options,
			requested_ip=requested_ip, lease_time=lease_time,
			client_identifier=client_identifier,
			vendor_class_identifier=vendor_class_identifier,
			server_identifier=server_identifier,
			parameter_request_list=parameter_request_list,
			max_message_size=max_message_size)
		return self._advance(MessageType.REQUEST, packet)


class Request(Message):
	ROLE = MessageType.REQUEST

	def to_ack(self, lease_time, client_ip, server_ip, *, file=None,
		server_name=None, message=None, vendor_class_identifier=None,
		options=None):
		"""Acknowledge this request, assigning `client_ip` for `lease_time`"""
		self._check_transition(MessageType.ACK)
		packet = self._reply()
		packet.your_ip = client_ip
		packet.boot_file_name = file or ''
		packet.server_name = server_name or ''

		packet.options.merge(OptionSet(options))
		for tag in CLIENT_NEGOTIATION_OPTIONS:
			packet.options.remove(tag)
		packet.options.upsert(Option(SERVER_IDENTIFIER, server_ip))
		packet.options.upsert_optional(optional(MESSAGE, message))
		packet.options.upsert_optional(
			optional(VENDOR_CLASS_IDENTIFIER, vendor_class_identifier))
		packet.options.upsert(Option(IP_ADDRESS_LEASE_TIME, lease_time))
		return self._advance(MessageType.ACK, packet)

	def to_nak(self, server_ip, *, message=None, client_identifier=None,
		vendor_class_identifier=None):
		self._check_transition(MessageType.NAK)
		packet = self._reply()
		packet.your_ip = 0
		packet.server_ip = 0

		for tag in (*CLIENT_NEGOTIATION_OPTIONS, IP_ADDRESS_LEASE_TIME):
			packet.options.remove(tag)
		packet.options.upsert(Option(SERVER_IDENTIFIER, server_ip))
		packet.options.upsert_optional(optional(MESSAGE, message))
		packet.options.upsert_optional(
			optional(CLIENT_IDENTIFIER, client_identifier))
		packet.options.upsert_optional(
			optional(VENDOR_CLASS_IDENTIFIER, vendor_class_identifier))
		return self._advance(MessageType.NAK, packet)


class Inform(Message):
	ROLE = MessageType.INFORM

	@classmethod
	def create(cls, hwaddr, client_ip, *, xid=None, rng=random,
		broadcast=False, client_identifier=None, vendor_class_identifier=None,
		parameter_request_list=None, max_message_size=None, options=None):
		packet = new_request_packet(cls.ROLE, hwaddr, xid=xid, rng=rng,
			flags=Flags.BROADCAST if broadcast else Flags.UNICAST,
			ciaddr=client_ip, options=options,
			client_identifier=client_identifier,
			vendor_class_identifier=vendor_class_identifier,
			parameter_request_list=parameter_request_list,
			max_message_size=max_message_size)
		return cls(packet)

	def to_ack(self, client_ip, server_ip, *, file=None, server_name=None,
		message=None, vendor_class_identifier=None, options=None):
		"""Answer with configuration only; an inform never gets a lease"""
		self._check_transition(MessageType.ACK)
		packet = self._reply()
		packet.client_ip = client_ip
		packet.your_ip = 0
		packet.boot_file_name = file or ''
		packet.server_name = server_name or ''

		packet.options.merge(OptionSet(options))
		for tag in (*CLIENT_NEGOTIATION_OPTIONS, IP_ADDRESS_LEASE_TIME):
			packet.options.remove(tag)
		packet.options.upsert(Option(SERVER_IDENTIFIER, server_ip))
		packet.options.upsert_optional(optional(MESSAGE, message))
		packet.options.upsert_optional(
			optional(VENDOR_CLASS_IDENTIFIER, vendor_class_identifier))
		return self._advance(MessageType.ACK, packet)


class Release(Message):
	ROLE = MessageType.RELEASE

	@classmethod
	def create(cls, hwaddr, client_ip, *, xid=None, rng=random,
		server_identifier=None, client_identifier=None, message=None,
		options=None):
		return cls(new_request_packet(cls.ROLE, hwaddr, xid=xid, rng=rng,
			ciaddr=client_ip, options=options,
			server_identifier=server_identifier,
			client_identifier=client_identifier, message=message))


class Decline(Message):
	ROLE = MessageType.DECLINE

	@classmethod
	def create(cls, hwaddr, *, xid=None, rng=random, requested_ip=None,
		server_identifier=None, client_identifier=None, message=None,
		options=None):
		return cls(new_request_packet(cls.ROLE, hwaddr, xid=xid, rng=rng,
			options=options, requested_ip=requested_ip,
			server_identifier=server_identifier,
			client_identifier=client_identifier, message=message))


class Ack(Message):
	ROLE = MessageType.ACK


class Nak(Message):
	ROLE = MessageType.NAK

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
