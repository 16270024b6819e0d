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

"""Virtual machine lookups against Azure hosted service deployments."""

from oslo_log import log as logging

from cirrus.common import azure
from cirrus.common import context as cirrus_context
from cirrus.common import states
from cirrus.common import utils
from cirrus import objects

LOG = logging.getLogger(__name__)

HOSTED_SERVICES = '/services/hostedservices'


def _translate_from_azure(context, server_id, service_name, role_name,
                          values):
    power_state = values.get('powerstate')
    server = objects.VirtualMachine(
        context,
        id=server_id,
        name=values.get('instancename') or role_name,
        service_name=service_name,
        role_name=role_name,
        status=states.map_server_state(values.get('instancestatus'),
                                       power_state),
        power_state=states.map_power_state(power_state))
    return server


class API(object):
    """Read-only access to the virtual machines of a subscription."""

    def __init__(self, client=None):
        self._client = client or azure.get_client()

    def get_server(self, context, server_id):
        """Look up one virtual machine.

        :param context: The request context.
        :param server_id: ``service:role`` id of the virtual machine.
        :returns: a :class:`cirrus.objects.VirtualMachine`, or None if the
                  deployment or role does not exist.
        """
        account = cirrus_context.require_account(context)
        service_name, role_name = utils.split_server_id(server_id)
        resource = '%s/%s/deployments/%s' % (HOSTED_SERVICES, service_name,
                                             service_name)
        with self._client.hold():
            doc = self._client.get_as_xml(account, resource)
        if doc is None:
            return None

        for instance in azure.find_elements(doc, 'RoleInstance'):
            values = azure.child_values(instance)
            if values.get('rolename') != role_name:
                continue
            server = _translate_from_azure(context, server_id, service_name,
                                           role_name, values)
            LOG.debug("Found server %(server)s in state %(state)s",
                      {'server': server_id, 'state': server.status})
            return server
        return None
