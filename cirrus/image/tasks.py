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

"""Handles on image captures running in the background."""

from concurrent import futures
import threading

from oslo_utils import timeutils

from cirrus.common import exception

CAPTURE_STARTED = 2.0


class CaptureTask(object):
    """Tracks one capture submitted to the capture worker pool.

    The task carries a cancellation signal and an optional deadline. Both
    are honoured by the worker up to the moment the capture request is
    sent to Azure; after that the capture runs to completion on the Azure
    side regardless.
    """

    def __init__(self, server_id, name, timeout=None):
        self.server_id = server_id
        self.name = name
        self.timeout = timeout
        self.percent_complete = 0.0
        self._cancel_event = threading.Event()
        self._watch = timeutils.StopWatch(duration=timeout)
        self._watch.start()
        self._future = None

    def __repr__(self):
        return ('<CaptureTask server=%s name=%s percent_complete=%s>' %
                (self.server_id, self.name, self.percent_complete))

    def attach(self, future):
        self._future = future

    @property
    def cancelled(self):
        return self._cancel_event.is_set()

    @property
    def expired(self):
        return self._watch.expired()

    def cancel(self):
        """Ask the capture to stop before it reaches Azure."""
        self._cancel_event.set()
        if self._future is not None:
            self._future.cancel()

    def update_progress(self, percent):
        self.percent_complete = percent

    def check_interrupted(self):
        """Raise if the task was cancelled or ran past its deadline."""
        if self.cancelled:
            raise exception.CaptureCancelled(server=self.server_id,
                                             name=self.name)
        if self.expired:
            raise exception.CaptureTimeout(server=self.server_id,
                                           name=self.name,
                                           timeout=self.timeout)

    def done(self):
        return self._future is not None and self._future.done()

    def result(self, timeout=None):
        """Wait for the capture and return the new image id.

        :raises: the exception the capture failed with, or
                 CaptureCancelled if it never started.
        """
        try:
            return self._future.result(timeout)
        except futures.CancelledError:
            raise exception.CaptureCancelled(server=self.server_id,
                                             name=self.name)

    def exception(self, timeout=None):
        try:
            return self._future.exception(timeout)
        except futures.CancelledError:
            return exception.CaptureCancelled(server=self.server_id,
                                              name=self.name)

    def add_done_callback(self, fn):
        self._future.add_done_callback(lambda future: fn(self))
