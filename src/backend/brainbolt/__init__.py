"""
Brainbolt 自适应答题服务
"""
