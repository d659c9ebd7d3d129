# SPDX-License-Identifier: MIT

import random
import struct

from dhcpwire.v4 import DHCP_MAGIC_COOKIE

CLIENT_MAC = bytes.fromhex('000b8201fc42')
CLIENT_XID = 0x3d1d

# NOTE(tori): a captured DHCPREQUEST: message type, client identifier,
# requested address and a parameter request list, followed by padding
CLIENT_REQUEST_OPTIONS = bytes([
	53, 1, 3,
	61, 7, 1, *CLIENT_MAC,
	50, 4, 192, 168, 0, 10,
	55, 4, 1, 3, 6, 42,
	255,
])


def header(*, op=1, htype=1, hlen=6, hops=0, xid=CLIENT_XID, secs=0,
	flags=b'\x00\x00', ciaddr=bytes(4), yiaddr=bytes(4), siaddr=bytes(4),
	giaddr=bytes(4), chaddr=CLIENT_MAC, sname=b'', file=b'',
	cookie=DHCP_MAGIC_COOKIE):
	"""Raw 240-byte header with every field overridable"""
	return struct.pack('!BBBBIH2s4s4s4s4s16s64s128s4s', op, htype, hlen,
		hops, xid, secs, flags, ciaddr, yiaddr, siaddr, giaddr, chaddr,
		sname, file, cookie)


def client_request(**fields):
	data = header(**fields) + CLIENT_REQUEST_OPTIONS
	return data + bytes(300 - len(data))


def seeded_rng(seed=2131):
	return random.Random(seed)

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
