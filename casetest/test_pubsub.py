#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
发布-订阅模式测试

测试主题前缀、Publisher和Subscriber角色的单步行为，以及真实socket上的主题过滤。
"""

import io
import itertools
import time
import unittest

import zmq

from zmqcat.core.base import StepResult, ZMQNode
from zmqcat.core.config import SessionConfig
from zmqcat.io.bridge import IOBridge
from zmqcat.logging.reporter import StatusReporter
from zmqcat.patterns.pubsub import Publisher, Subscriber, apply_topic

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from casetest import FakeNode, get_test_transport

_addresses = itertools.count()


class TestApplyTopic(unittest.TestCase):
    """主题前缀测试"""

    def test_empty_topic_leaves_line_unchanged(self):
        """测试空主题不修改内容"""
        for line in ["hello", "", " leading space", "weather sunny"]:
            with self.subTest(line=line):
                self.assertEqual(apply_topic("", line), line)

    def test_topic_prefix(self):
        """测试主题前缀加一个空格"""
        self.assertEqual(apply_topic("x", "hello"), "x hello")
        self.assertEqual(apply_topic("weather", ""), "weather ")

    def test_prefix_is_unconditional(self):
        """测试即使已有相同前缀也照样添加"""
        self.assertEqual(apply_topic("w", "w already"), "w w already")
        self.assertEqual(apply_topic("w", "w"), "w w")

    def test_type_checked(self):
        """测试参数类型检查"""
        from typeguard import TypeCheckError

        with self.assertRaises(TypeCheckError):
            apply_topic(None, "line")


class TestPublisher(unittest.TestCase):
    """发布者角色测试"""

    def setUp(self):
        self.stderr = io.StringIO()

    def _publisher(self, **kwargs):
        config = SessionConfig(**kwargs)
        reporter = StatusReporter(verbose=config.verbose, quiet=config.quiet, stream=self.stderr)
        return Publisher(config, get_test_transport(), reporter)

    def test_publisher_attributes(self):
        """测试角色属性"""
        publisher = self._publisher(address="tcp://*:5556", bind=True)

        self.assertEqual(publisher.name, "pub")
        self.assertEqual(publisher.socket_type, zmq.PUB)
        self.assertTrue(publisher.needs_grace)
        self.assertEqual(publisher.describe(), "Publishing on tcp://*:5556 (mode=bind)")
        self.assertEqual(publisher.summary(3), "Published 3 messages")

    def test_publish_lines_with_topic(self):
        """测试带主题发布"""
        publisher = self._publisher(topic="news", verbose=True)
        node = FakeNode()
        bridge = IOBridge(io.StringIO("first\nsecond\n"), io.StringIO())

        self.assertIs(publisher.step(node, bridge), StepResult.HANDLED)
        self.assertIs(publisher.step(node, bridge), StepResult.HANDLED)
        self.assertIs(publisher.step(node, bridge), StepResult.END_OF_INPUT)

        self.assertEqual(node.sent, ["news first", "news second"])
        self.assertIn("Sent: news first", self.stderr.getvalue())

    def test_publish_without_topic(self):
        """测试无主题发布"""
        publisher = self._publisher()
        node = FakeNode()
        bridge = IOBridge(io.StringIO("hello\n"), io.StringIO())

        publisher.step(node, bridge)

        self.assertEqual(node.sent, ["hello"])
        self.assertEqual(self.stderr.getvalue(), "")

    def test_unwritable_socket_keeps_line(self):
        """测试暂时不可写时保留待发送行"""
        publisher = self._publisher()
        node = FakeNode(writable=False)
        bridge = IOBridge(io.StringIO("hello\n"), io.StringIO())

        self.assertIs(publisher.step(node, bridge), StepResult.IDLE)
        self.assertEqual(node.sent, [])

        node.writable = True
        self.assertIs(publisher.step(node, bridge), StepResult.HANDLED)
        self.assertEqual(node.sent, ["hello"])


class TestSubscriber(unittest.TestCase):
    """订阅者角色测试"""

    def setUp(self):
        self.stderr = io.StringIO()

    def _subscriber(self, **kwargs):
        config = SessionConfig(**kwargs)
        reporter = StatusReporter(verbose=config.verbose, quiet=config.quiet, stream=self.stderr)
        return Subscriber(config, get_test_transport(), reporter)

    def test_subscriber_attributes(self):
        """测试角色属性"""
        subscriber = self._subscriber(address="tcp://localhost:5556", topic="weather")

        self.assertEqual(subscriber.name, "sub")
        self.assertEqual(subscriber.socket_type, zmq.SUB)
        self.assertFalse(subscriber.needs_grace)
        self.assertEqual(subscriber.describe(),
                         "Subscribed to tcp://localhost:5556 (topic='weather', mode=connect)")
        self.assertEqual(subscriber.summary(0), "Received 0 messages")

    def test_setup_subscribes_topic(self):
        """测试设置时订阅主题"""
        node = FakeNode()
        self._subscriber(topic="weather").setup(node)
        self.assertEqual(node.subscriptions, ["weather"])

    def test_setup_empty_topic_subscribes_all(self):
        """测试空主题订阅全部"""
        node = FakeNode()
        self._subscriber().setup(node)
        self.assertEqual(node.subscriptions, [""])

    def test_receive_writes_line(self):
        """测试收到消息写到输出"""
        subscriber = self._subscriber()
        node = FakeNode(inbox=["hello"])
        output = io.StringIO()
        bridge = IOBridge(io.StringIO(), output)

        self.assertIs(subscriber.step(node, bridge), StepResult.HANDLED)
        self.assertIs(subscriber.step(node, bridge), StepResult.IDLE)

        self.assertEqual(output.getvalue(), "hello\n")
        self.assertEqual(node.receive_timeouts, [20, 20])


class TestTopicFiltering(unittest.TestCase):
    """真实socket上的主题过滤测试"""

    def setUp(self):
        self.context = zmq.Context()
        self.address = f"inproc://pubsub-{next(_addresses)}"
        self.transport = get_test_transport()

        self.pub = ZMQNode(zmq.PUB, self.address, bind=True, transport=self.transport, context=self.context)
        self.pub.open()

    def tearDown(self):
        self.pub.close()
        self.context.term()

    def _receive_all(self, node, timeout=0.5):
        messages = []
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            message = node.try_receive_frame(20)
            if message is not None:
                messages.append(message)
        return messages

    def _subscriber_node(self, topic):
        node = ZMQNode(zmq.SUB, self.address, bind=False, transport=self.transport, context=self.context)
        node.open()
        node.subscribe(topic)
        time.sleep(0.2)
        return node

    def test_prefix_match(self):
        """测试前缀匹配而不是子串匹配"""
        sub = self._subscriber_node("x")
        try:
            for line in ["hello", "middle x", "ignored"]:
                self.pub.send_frame(apply_topic("x", line))
            self.pub.send_frame("y x not for us")
            self.pub.send_frame("xylophone")

            messages = self._receive_all(sub)
        finally:
            sub.close()

        self.assertEqual(messages, ["x hello", "x middle x", "x ignored", "xylophone"])

    def test_empty_topic_receives_everything(self):
        """测试空主题接收全部"""
        sub = self._subscriber_node("")
        try:
            self.pub.send_frame("a")
            self.pub.send_frame("b c")
            messages = self._receive_all(sub)
        finally:
            sub.close()

        self.assertEqual(messages, ["a", "b c"])

    def test_fan_out(self):
        """测试每个订阅者都收到全部消息"""
        subs = [self._subscriber_node("") for _ in range(2)]
        try:
            self.pub.send_frame("broadcast")
            received = [self._receive_all(sub) for sub in subs]
        finally:
            for sub in subs:
                sub.close()

        self.assertEqual(received, [["broadcast"], ["broadcast"]])

    def test_non_utf8_payload(self):
        """测试非UTF-8内容被替换字符解码"""
        sub = self._subscriber_node("")
        try:
            self.pub.socket.send(b"bad \xff byte")
            messages = self._receive_all(sub)
        finally:
            sub.close()

        self.assertEqual(messages, ["bad � byte"])


if __name__ == '__main__':
    unittest.main()
