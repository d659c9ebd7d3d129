# SPDX-License-Identifier: MIT

import enum

# NOTE(tori): hardware types come from the following:
# https://www.iana.org/assignments/arp-parameters/arp-parameters.xhtml
# only ethernet is accepted in packets; every network of interest has
# settled on ethernet encapsulation

@enum.unique
class HardwareType(enum.IntEnum):
	ETHERNET = 1

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
