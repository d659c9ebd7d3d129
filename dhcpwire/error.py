# SPDX-License-Identifier: MIT

__all__ = ['Error', 'DHCPv4Error', 'InvalidPacketLengthError',
	'HeaderFieldError', 'MessageOperationError', 'HardwareTypeError',
	'HardwareAddressError', 'HopsError', 'TransactionIdError', 'SecondsError',
	'FlagsError', 'ClientAddressError', 'YourAddressError',
	'ServerAddressError', 'GatewayAddressError', 'ServerNameError',
	'BootFileNameError', 'CookieError', 'OptionError', 'OptionParseError',
	'OptionValueError', 'OptionConversionError', 'OptionNotFoundError',
	'MessageTypeError', 'TransitionError']


class Error(Exception):
	"""Base class for DHCP errors"""
	pass


class DHCPv4Error(Error):
	"""Base class for DHCPv4 errors"""
	pass


class InvalidPacketLengthError(DHCPv4Error):
	"""The datagram is too short to hold the fixed header"""
	def __init__(self, length, minimum=240):
		self.length = length
		self.minimum = minimum
		super().__init__('packet is %d bytes long, expected at least %d'
			% (length, minimum))


class HeaderFieldError(DHCPv4Error):
	"""Base class for errors in a single fixed header field"""
	field = None

	def __init__(self, message, value=None):
		self.value = value
		super().__init__('%s: %s' % (self.field, message))


class MessageOperationError(HeaderFieldError):
	field = 'op'


class HardwareTypeError(HeaderFieldError):
	field = 'htype'


class HardwareAddressError(HeaderFieldError):
	field = 'chaddr'


class HopsError(HeaderFieldError):
	field = 'hops'


class TransactionIdError(HeaderFieldError):
	field = 'xid'


class SecondsError(HeaderFieldError):
	field = 'secs'


class FlagsError(HeaderFieldError):
	field = 'flags'


class ClientAddressError(HeaderFieldError):
	field = 'ciaddr'


class YourAddressError(HeaderFieldError):
	field = 'yiaddr'


class ServerAddressError(HeaderFieldError):
	field = 'siaddr'


class GatewayAddressError(HeaderFieldError):
	field = 'giaddr'


class ServerNameError(HeaderFieldError):
	field = 'sname'


class BootFileNameError(HeaderFieldError):
	field = 'file'


class CookieError(HeaderFieldError):
	field = 'cookie'


class OptionError(DHCPv4Error):
	"""Base class for errors tied to a single option tag"""
	def __init__(self, tag, message):
		self.tag = tag
		super().__init__('option %r: %s' % (tag, message))


class OptionParseError(OptionError):
	"""Malformed TLV or payload"""
	pass


class OptionValueError(OptionError):
	"""Well-formed value that fails a domain constraint"""
	pass


class OptionConversionError(OptionError):
	"""Value does not fit (or cannot be read as) the option's kind"""
	pass


class OptionNotFoundError(OptionError, LookupError):
	def __init__(self, tag):
		super().__init__(tag, 'not present')


class MessageTypeError(DHCPv4Error):
	"""Packet cannot be classified into a message role"""
	pass


class TransitionError(DHCPv4Error):
	"""Attempted a role transition that is not a legal edge"""
	pass

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
