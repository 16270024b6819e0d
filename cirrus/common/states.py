# Copyright 2016 Huawei Technologies Co.,LTD.
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""
Mapping of Azure role instance states onto server states, and the fixed
lifecycle state reported for OS images.
"""

##############
# Power states
##############

POWER_ON = 'power on'
""" Server is powered on. """

POWER_OFF = 'power off'
""" Server is powered off. """

NOSTATE = None
""" No state information """


#################
# Server states
#################

ACTIVE = 'active'
""" The server is active """

BUILDING = 'building'
""" The server has not finished the original build process """

DELETING = 'deleting'
""" The server has not finished the original delete process """

ERROR = 'error'
""" The server is in error """

POWERING_ON = 'powering-on'
""" The server is in powering on """

POWERING_OFF = 'powering-off'
""" The server is in powering off """

STOPPED = 'stopped'
""" The server is powered off """

UNKNOWN = 'unknown'
""" Azure reported a state we do not track """

SERVER_STATES = (ACTIVE, BUILDING, DELETING, ERROR, POWERING_ON,
                 POWERING_OFF, STOPPED, UNKNOWN)


#################
# Image states
#################

IMAGE_ACTIVE = 'active'
""" The image is usable. Azure never reports anything else for OS images. """

IMAGE_STATES = (IMAGE_ACTIVE,)


###############################
# Azure role instance mappings
###############################

_POWER_STATE_MAP = {
    'started': POWER_ON,
    'starting': POWER_ON,
    'stopping': POWER_OFF,
    'stopped': POWER_OFF,
}

_INSTANCE_STATUS_MAP = {
    'readyrole': ACTIVE,
    'stoppedvm': STOPPED,
    'stoppeddeallocated': STOPPED,
    'stoppingvm': POWERING_OFF,
    'stoppingrole': POWERING_OFF,
    'startingvm': POWERING_ON,
    'startingrole': POWERING_ON,
    'provisioning': BUILDING,
    'createdvm': BUILDING,
    'creatingvm': BUILDING,
    'deletingvm': DELETING,
    'failedstartingrole': ERROR,
    'failedstartingvm': ERROR,
    'provisioningfailed': ERROR,
}

_POWER_STATE_FALLBACK = {
    'started': ACTIVE,
    'starting': POWERING_ON,
    'stopping': POWERING_OFF,
    'stopped': STOPPED,
}


def map_power_state(power_state):
    if not power_state:
        return NOSTATE
    return _POWER_STATE_MAP.get(power_state.lower(), NOSTATE)


def map_server_state(instance_status, power_state=None):
    """Work out a server state from an Azure role instance.

    ``InstanceStatus`` wins when Azure reports one we know about; otherwise
    the coarser ``PowerState`` is used.
    """
    if instance_status:
        state = _INSTANCE_STATUS_MAP.get(instance_status.lower())
        if state is not None:
            return state
    if power_state:
        state = _POWER_STATE_FALLBACK.get(power_state.lower())
        if state is not None:
            return state
    return UNKNOWN
