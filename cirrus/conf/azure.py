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

from keystoneauth1 import loading as ks_loading
from oslo_config import cfg

from cirrus.common.i18n import _

opt_group = cfg.OptGroup(
    'azure',
    title='Azure Service Management Options',
    help="""
Configuration options for talking to the Azure Service Management API.
Requests are authenticated with a management certificate, so the
following options must be set:
* certfile
* keyfile (unless the key is bundled into certfile)
""")

opts = [
    cfg.URIOpt(
        'endpoint',
        default='https://management.core.windows.net',
        schemes=['http', 'https'],
        help=_('Base URL of the Azure Service Management API. The '
               'subscription id from the request context is appended to '
               'it for every call.')),
    cfg.StrOpt(
        'api_version',
        default='2012-03-01',
        help=_('Value sent in the x-ms-version header.')),
    cfg.IntOpt(
        'capture_workers',
        default=4,
        min=1,
        help=_("""
The size of the worker pool used to run image capture operations.
Captures submitted while every worker is busy wait for a free one.
""")),
    cfg.IntOpt(
        'capture_timeout',
        default=0,
        min=0,
        help=_("""
Number of seconds a submitted capture may wait before it issues its
request. A capture that has not started by then fails with a timeout.
Set to 0 to disable the deadline.
""")),
]


def register_opts(conf):
    conf.register_group(opt_group)
    conf.register_opts(opts, group=opt_group)
    ks_loading.register_session_conf_options(conf, group=opt_group.name)
