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

"""Subscription level facts about the Azure data center."""

from oslo_log import log as logging

from cirrus.common import azure
from cirrus.common import context as cirrus_context
from cirrus.common import exception

LOG = logging.getLogger(__name__)

COMPUTE = 'compute'
STORAGE = 'storage'
SERVICES = (COMPUTE, STORAGE)

SUBSCRIPTION_ACTIVE = 'active'


class API(object):

    def __init__(self, client=None):
        self._client = client or azure.get_client()

    def is_subscribed(self, context, service=COMPUTE):
        """Whether the subscription can use the given Azure service.

        Both compute and storage come with any active subscription, so
        this boils down to the subscription status.
        """
        account = cirrus_context.require_account(context)
        if service not in SERVICES:
            LOG.debug("Unknown Azure service %s", service)
            return False
        try:
            with self._client.hold():
                doc = self._client.get_as_xml(account, '')
        except exception.NotAuthorized:
            LOG.warning("Credentials were rejected while checking "
                        "subscription %s", account)
            return False
        if doc is None:
            return False
        status = azure.child_values(doc).get('subscriptionstatus')
        return (status or '').lower() == SUBSCRIPTION_ACTIVE
