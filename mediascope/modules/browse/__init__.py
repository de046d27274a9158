"""浏览模块：过期响应保护与分页累加。"""
