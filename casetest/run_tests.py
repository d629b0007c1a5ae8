#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试运行器

运行全部或部分测试模块并打印测试总结。
"""

import unittest
import sys
import os
import time

# 添加项目根目录到路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 导入测试模块
from casetest import test_core
from casetest import test_session
from casetest import test_pubsub
from casetest import test_reqrep
from casetest import test_pushpull
from casetest import test_cli
from casetest import test_integration

MODULES = {
    'core': test_core,
    'session': test_session,
    'pubsub': test_pubsub,
    'reqrep': test_reqrep,
    'pushpull': test_pushpull,
    'cli': test_cli,
    'integration': test_integration,
}

# 快速测试跳过需要等待截止时间的用例
SLOW_KEYWORDS = ['timeout', 'grace']


class ColoredTextTestResult(unittest.TextTestResult):
    """带颜色的测试结果"""

    def __init__(self, stream, descriptions, verbosity):
        super().__init__(stream, descriptions, verbosity)
        self.success_count = 0
        self.verbosity = verbosity

    def addSuccess(self, test):
        super().addSuccess(test)
        self.success_count += 1
        if self.verbosity > 1:
            self.stream.write("\033[92m✓\033[0m ")
            self.stream.write(self.getDescription(test))
            self.stream.writeln()

    def addError(self, test, err):
        super().addError(test, err)
        if self.verbosity > 1:
            self.stream.write("\033[91m✗\033[0m ")
            self.stream.write(self.getDescription(test))
            self.stream.writeln(" (ERROR)")

    def addFailure(self, test, err):
        super().addFailure(test, err)
        if self.verbosity > 1:
            self.stream.write("\033[91m✗\033[0m ")
            self.stream.write(self.getDescription(test))
            self.stream.writeln(" (FAIL)")


class ColoredTextTestRunner(unittest.TextTestRunner):
    """带颜色的测试运行器"""

    def _makeResult(self):
        return ColoredTextTestResult(self.stream, self.descriptions, self.verbosity)


def _iter_tests(suite):
    for item in suite:
        if isinstance(item, unittest.TestSuite):
            yield from _iter_tests(item)
        else:
            yield item


def create_test_suite(modules=None, quick=False):
    """创建测试套件"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for module in modules or MODULES.values():
        if quick and module is test_integration:
            continue
        for test in _iter_tests(loader.loadTestsFromModule(module)):
            name = test._testMethodName.lower()
            if quick and any(keyword in name for keyword in SLOW_KEYWORDS):
                continue
            suite.addTest(test)

    return suite


def run_suite(suite, title):
    """运行测试套件并打印总结"""
    runner = ColoredTextTestRunner(verbosity=2, stream=sys.stdout, buffer=True)

    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)

    start_time = time.time()
    result = runner.run(suite)
    duration = time.time() - start_time

    total_tests = result.testsRun
    success_count = getattr(result, 'success_count', total_tests - len(result.failures) - len(result.errors))

    print("\n" + "=" * 70)
    print("测试总结")
    print("=" * 70)
    print(f"总测试数: {total_tests}")
    print(f"\033[92m成功: {success_count}\033[0m")
    if result.failures:
        print(f"\033[91m失败: {len(result.failures)}\033[0m")
    if result.errors:
        print(f"\033[91m错误: {len(result.errors)}\033[0m")
    print(f"\n执行时间: {duration:.2f} 秒")

    for label, items in (("FAIL", result.failures), ("ERROR", result.errors)):
        for test, traceback in items:
            print(f"\n\033[91m{label}: {test}\033[0m")
            print("-" * 50)
            print(traceback)

    return result.wasSuccessful()


def main():
    """主函数"""
    import argparse

    parser = argparse.ArgumentParser(description='zmqcat 测试运行器')
    parser.add_argument('--module', '-m', choices=sorted(MODULES), help='运行特定模块的测试')
    parser.add_argument('--quick', '-q', action='store_true', help='跳过集成测试和需要等待超时的测试')
    parser.add_argument('--list', '-l', action='store_true', help='列出所有测试')

    args = parser.parse_args()

    modules = [MODULES[args.module]] if args.module else None
    suite = create_test_suite(modules, quick=args.quick)

    if args.list:
        print("可用测试:")
        for test in _iter_tests(suite):
            print(f"  {test}")
        return

    title = f"zmqcat 测试套件: {args.module}" if args.module else "zmqcat 测试套件"
    success = run_suite(suite, title)

    # 返回适当的退出码
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
