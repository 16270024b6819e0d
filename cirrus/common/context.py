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

from oslo_context import context

from cirrus.common import exception


class RequestContext(context.RequestContext):
    """Extends security contexts from the oslo.context library.

    Carries the Azure subscription (``account_number``) that every Service
    Management URL is rooted at, and the region the caller is working in.
    """

    def __init__(self, account_number=None, region_id=None, **kwargs):
        super(RequestContext, self).__init__(**kwargs)
        self.account_number = account_number
        self.region_id = region_id

    def to_dict(self):
        values = super(RequestContext, self).to_dict()
        values.update({'account_number': self.account_number,
                       'region_id': self.region_id})
        return values

    @classmethod
    def from_dict(cls, values, **kwargs):
        kwargs.setdefault('account_number', values.get('account_number'))
        kwargs.setdefault('region_id', values.get('region_id'))
        return super(RequestContext, cls).from_dict(values, **kwargs)


def get_admin_context(account_number=None, region_id=None):
    """Create an administrator context."""
    return RequestContext(account_number=account_number,
                          region_id=region_id,
                          is_admin=True,
                          overwrite=False)


def require_account(context):
    """Return the subscription id of the context or fail loudly."""
    if context is None or not getattr(context, 'account_number', None):
        raise exception.NoContext()
    return context.account_number
