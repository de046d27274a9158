"""聚合查询模块：资源站并发查询、超时与部分失败容忍。"""
